"""Prompt and marker text for worksheet analysis."""

WORKSHEET_ANALYSIS_PROMPT = """你是一位資深的私人家教。請分析這張學生考卷照片。
1. 辨識學生在哪些題目出錯了。
2. 歸納學生的主要錯誤模式（例如：計算粗心、公式帶錯、讀題不清）。
3. 指出觀念薄弱的地方。
4. 給予後續輔導的具體建議。

請使用繁體中文，格式清晰，並保持專業與簡潔。"""

# Line placed before the model's narrative when it is appended to report details
ANALYSIS_MARKER = "\n\n--- 🤖 AI 考卷分析報告 ---\n"


def merge_analysis(details: str, analysis: str) -> str:
    """Append an analysis narrative to existing details; never overwrites."""
    return details + ANALYSIS_MARKER + analysis
