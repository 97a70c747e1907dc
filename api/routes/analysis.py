import logging
from fastapi import APIRouter, HTTPException

from schemas.analysis import AnalysisRequest, AnalysisResults
from services.analysis_service import AnalysisError, analyze_content
from services.content_service import FetchError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/endpoint")
async def endpoint_info():
    return {"message": "News analysis API endpoint"}


@router.post("/endpoint", response_model=AnalysisResults)
async def analyze(req: AnalysisRequest):
    """
    Analyze a news article (URL, HTML or plain text) for sentiment,
    factuality, political leaning and source credibility.
    """
    try:
        return await analyze_content(req)
    except FetchError as e:
        logger.error(f"Error fetching URL {req.url} (status {e.status_code}): {e.reason}")
        raise HTTPException(
            status_code=400,
            detail=f"Failed to fetch content from URL: {str(e) or 'Unknown error'}",
        )
    except AnalysisError as e:
        logger.error(f"Analysis step failed: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Analysis error: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Failed to analyze the content",
        )
