"""Report endpoints - manual trigger for the weekly report."""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from clock_slayer.errors import DeliveryFailure, ReportAlreadyRunning, StoreUnavailable
from clock_slayer.services.report_service import ReportPipeline


router = APIRouter(prefix="/api", tags=["reports"])


def get_report_pipeline(request: Request) -> ReportPipeline:
    """Dependency returning the pipeline shared with the scheduler."""
    pipeline = getattr(request.app.state, "report_pipeline", None)
    if pipeline is None:
        raise RuntimeError("Report pipeline not initialized")
    return pipeline


@router.post("/test-email")
async def send_test_email(pipeline: ReportPipeline = Depends(get_report_pipeline)):
    """
    Generate and send the weekly report now.

    - Uses the same pipeline and window as the scheduled run
    - 409 if a report is already being generated
    - 502 if the e-mail could not be delivered
    - 503 if the record store could not be read
    """
    try:
        result = await pipeline.run()
    except ReportAlreadyRunning as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DeliveryFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except StoreUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return {"success": True, "message": "Test email sent!", "report": result}
