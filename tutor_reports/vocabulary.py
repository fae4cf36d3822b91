"""Categories, subjects and the fixed topic vocabulary.

Single source of truth for the closed enums persisted with each report and for
the topic options offered per subject and category.
"""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    TUTORING = "輔導"
    MAKEUP = "補課"


class Subject(StrEnum):
    ENGLISH = "英文"
    MATH = "數學"
    CHINESE = "國文"
    SCIENCE = "自然"
    SOCIAL_STUDIES = "社會"


# Stored for makeup sessions, where the subject does not apply
MAKEUP_SUBJECT = Subject.ENGLISH

SUBJECT_TOPICS: dict[Subject, tuple[str, ...]] = {
    Subject.ENGLISH: ("單字", "課文閱讀", "文法解析", "聽力練習", "寫作指導"),
    Subject.MATH: ("觀念講解", "計算練習", "幾何圖形", "應用問題", "歷屆試題"),
    Subject.CHINESE: ("古文解析", "白話文閱讀", "作文指導", "修辭與成語", "國學常識"),
    Subject.SCIENCE: ("生物", "理化計算", "實驗觀念", "地球科學", "觀念統整"),
    Subject.SOCIAL_STUDIES: ("歷史脈絡", "地理環境", "公民素養", "時事分析", "重點整理"),
}

MAKEUP_TOPICS: tuple[str, ...] = ("課本", "習作", "閱讀", "小考", "測驗")


def topic_options(category: Category, subject: Subject) -> tuple[str, ...]:
    """Return the fixed topic vocabulary for a category/subject pair."""
    if category == Category.MAKEUP:
        return MAKEUP_TOPICS
    return SUBJECT_TOPICS.get(subject, ())


def effective_subject(category: Category, subject: Subject) -> Subject:
    """Subject actually stored: makeup sessions always store MAKEUP_SUBJECT."""
    return MAKEUP_SUBJECT if category == Category.MAKEUP else subject


def topic_label(category: Category) -> str:
    """Name of the topic field as shown to staff."""
    return "補課內容" if category == Category.MAKEUP else "教學重點"
