"""Enrichment router: worksheet capture/import and AI analysis."""

from fastapi import APIRouter, File, UploadFile

from tutor_reports.dependencies import CurrentViewer, WorkflowDep
from tutor_reports.schemas.enrichment import AnalysisResponse, EnrichmentStatusResponse
from tutor_reports.schemas.reports import ReportDraft
from tutor_reports.services.enrichment.workflow import EnrichmentWorkflow

router = APIRouter()


def _status(workflow: EnrichmentWorkflow) -> EnrichmentStatusResponse:
    image = workflow.image
    return EnrichmentStatusResponse(
        state=workflow.state.value,
        has_image=image is not None,
        image_bytes=len(image) if image else 0,
    )


@router.get("/enrichment", response_model=EnrichmentStatusResponse)
async def get_enrichment_status(workflow: WorkflowDep, viewer: CurrentViewer) -> EnrichmentStatusResponse:
    """Current workflow state."""
    return _status(workflow)


@router.post("/enrichment/capture", response_model=EnrichmentStatusResponse)
async def start_capture(workflow: WorkflowDep, viewer: CurrentViewer) -> EnrichmentStatusResponse:
    """Acquire the camera."""
    await workflow.start_capture()
    return _status(workflow)


@router.post("/enrichment/snapshot", response_model=EnrichmentStatusResponse)
async def take_snapshot(workflow: WorkflowDep, viewer: CurrentViewer) -> EnrichmentStatusResponse:
    """Grab the current frame as JPEG and release the camera."""
    await workflow.snapshot()
    return _status(workflow)


@router.post("/enrichment/cancel", response_model=EnrichmentStatusResponse)
async def cancel_capture(workflow: WorkflowDep, viewer: CurrentViewer) -> EnrichmentStatusResponse:
    """Release the camera without keeping a frame."""
    workflow.cancel_capture()
    return _status(workflow)


@router.post("/enrichment/upload", response_model=EnrichmentStatusResponse)
async def upload_image(
    workflow: WorkflowDep,
    viewer: CurrentViewer,
    file: UploadFile = File(...),
) -> EnrichmentStatusResponse:
    """Import a worksheet photo from a file instead of the camera."""
    data = await file.read()
    workflow.import_image(data)
    return _status(workflow)


@router.post("/enrichment/discard", response_model=EnrichmentStatusResponse)
async def discard_image(workflow: WorkflowDep, viewer: CurrentViewer) -> EnrichmentStatusResponse:
    """Drop the held image; a pending analysis result will be ignored."""
    workflow.discard_image()
    return _status(workflow)


@router.post("/enrichment/analyze", response_model=AnalysisResponse)
async def analyze_image(
    draft: ReportDraft,
    workflow: WorkflowDep,
    viewer: CurrentViewer,
) -> AnalysisResponse:
    """
    Analyze the held image and append the narrative to the draft's details.

    The returned draft is the caller's draft with the analysis merged in; it
    is not persisted until the report is submitted.
    """
    analysis = await workflow.analyze(draft)
    return AnalysisResponse(
        state=workflow.state.value,
        merged=analysis is not None,
        analysis=analysis,
        draft=draft,
    )
