"""
Review Radar - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from review_radar import __version__
from review_radar.config import config
from review_radar.adapters.claude_client import ClaudeClient
from review_radar.adapters.markup_source import HTMLMarkupSource
from review_radar.adapters.page_fetcher import PageFetcher, PageFetchError
from review_radar.extraction.cascade import ExtractionCascade
from review_radar.models.rating import PlatformRatingObservation
from review_radar.ratings.aggregator import RatingAggregator
from review_radar.ratings.collector import RatingCollector
from review_radar.utils.logger import LayerLogger, get_logger, set_trace_id


# Initialize FastAPI app
app = FastAPI(
    title="Review Radar",
    description="Detects the product on a shopping page and aggregates its ratings across retailers",
    version=__version__,
)

# CORS middleware (browser extension content scripts call in from any origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize components
cascade = ExtractionCascade(logger=LayerLogger("extraction_cascade"))
aggregator = RatingAggregator(logger=LayerLogger("rating_aggregator"))
fetcher = PageFetcher()
collector = RatingCollector(
    fetcher=fetcher,
    suggester=ClaudeClient() if config.is_llm_configured() else None,
)

logger = get_logger("main")


# Request/Response models
class DetectRequest(BaseModel):
    """Request model for product detection. Without html the page is fetched."""
    url: str
    html: Optional[str] = None


class AggregateRequest(BaseModel):
    """Request model for aggregating already-collected observations."""
    observations: List[PlatformRatingObservation] = Field(default_factory=list)


class RatingsRequest(BaseModel):
    """Request model for collecting and aggregating ratings."""
    title: str = Field(min_length=1)
    url: str


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/api/detect")
async def detect(request: DetectRequest):
    """
    Detect the product shown on a page.

    Returns {"product": null} for pages that are not product pages.
    """
    trace_id = set_trace_id()
    logger.info("detect_request", url=request.url, has_html=request.html is not None, trace_id=trace_id)

    try:
        if request.html is not None:
            source = HTMLMarkupSource.from_html(request.html, request.url)
        else:
            source = await fetcher.fetch(request.url)
    except PageFetchError as e:
        logger.error("detect_fetch_error", error=str(e), url=request.url)
        raise HTTPException(status_code=502, detail=str(e))

    try:
        product = cascade.extract(source)
    except Exception as e:
        logger.error("detect_error", error=str(e), url=request.url)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "product": product.model_dump(mode="json", by_alias=True) if product else None,
        "traceId": trace_id,
    }


@app.post("/api/aggregate")
async def aggregate(request: AggregateRequest):
    """Aggregate caller-supplied observations into one score."""
    trace_id = set_trace_id()
    logger.info("aggregate_request", observations=len(request.observations), trace_id=trace_id)

    score = aggregator.aggregate(request.observations)
    return score.model_dump(mode="json", by_alias=True)


@app.post("/api/ratings")
async def ratings(request: RatingsRequest):
    """
    Collect ratings for a product across retailers and aggregate them.

    Probe failures only shrink the result; they never fail the request.
    """
    trace_id = set_trace_id()
    logger.info("ratings_request", url=request.url, title=request.title[:80], trace_id=trace_id)

    try:
        observations = await collector.collect(request.title, request.url)
        score = aggregator.aggregate(observations)
    except Exception as e:
        logger.error("ratings_error", error=str(e), url=request.url)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "observations": [o.model_dump(mode="json", by_alias=True) for o in observations],
        "score": score.model_dump(mode="json", by_alias=True),
        "traceId": trace_id,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
