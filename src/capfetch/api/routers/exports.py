"""Table and CSV export endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from capfetch.api.deps import get_context_settings, get_csv_exporter, get_orchestrator
from capfetch.api.schemas import ExportFileResponse, ExportKind, TableMetric, TableResponse
from capfetch.config.settings import Settings
from capfetch.csv import CsvExporter, EXPORT_FILENAMES
from capfetch.services import BatchOrchestrator

router = APIRouter(prefix="/batch", tags=["exports"])


@router.get("/table/{metric}", response_model=TableResponse)
def get_table(
    metric: TableMetric,
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
    exporter: CsvExporter = Depends(get_csv_exporter),
) -> TableResponse:
    """Ticker x year grid for a metric; callable mid-run."""
    rows = exporter.table(orchestrator.get_snapshot(), metric.value)
    return TableResponse(metric=metric.value, rows=rows)


@router.get("/export/{kind}")
def download_csv(
    kind: ExportKind,
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
    exporter: CsvExporter = Depends(get_csv_exporter),
) -> Response:
    """Download an export as CSV."""
    content = exporter.render(orchestrator.get_snapshot(), kind.value)
    filename = EXPORT_FILENAMES[kind.value]
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/export/{kind}/file", response_model=ExportFileResponse)
def save_csv(
    kind: ExportKind,
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
    exporter: CsvExporter = Depends(get_csv_exporter),
    settings: Settings = Depends(get_context_settings),
) -> ExportFileResponse:
    """Write an export into the configured export directory."""
    path = exporter.export_csv(orchestrator.get_snapshot(), kind.value, settings.get_export_dir())
    return ExportFileResponse(path=str(path))
