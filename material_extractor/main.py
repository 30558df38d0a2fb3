"""
Material Composition Extractor - FastAPI Application
Main entry point with REST API endpoints.
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from material_extractor.config import config
from material_extractor.utils.logger import LayerLogger, get_logger, set_trace_id
from material_extractor.layers.extraction import MaterialExtractionLayer
from material_extractor.models.materials import (
    EXTRACT_MATERIALS_REQUEST,
    ExtractionRequest,
    ExtractionResult,
)

VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(
    title="Material Composition Extractor",
    description="Extracts fabric/material composition from retail product pages",
    version=VERSION,
)

# CORS middleware (the browser extension popup calls in from its own origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

extraction_layer = MaterialExtractionLayer()

logger = get_logger("main")
api_logger = LayerLogger("api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


# Sync handler: FastAPI runs it in its threadpool
@app.post("/api/extract-materials", response_model=ExtractionResult)
def extract_materials(request: ExtractionRequest):
    """
    Extract the material composition of the page snapshot in the request.

    Returns ``materials``, ``confidence`` and ``source``; a page with no
    qualifying composition returns ``materials: null`` with confidence
    and source ``none``.
    """
    trace_id = set_trace_id()

    if request.type != EXTRACT_MATERIALS_REQUEST:
        logger.warning("unsupported_request_type", request_type=request.type, trace_id=trace_id)
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported request type: {request.type}",
        )

    logger.info(
        "material_extraction_request",
        html_length=len(request.html),
        trace_id=trace_id,
    )

    try:
        result = extraction_layer.extract_html(request.html)
    except Exception as e:
        api_logger.log_error(str(e), error_type=type(e).__name__, trace_id=trace_id)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        "material_extraction_response",
        materials=result.materials,
        confidence=result.confidence.value,
        source=result.source.value,
    )
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level="debug" if config.DEBUG else "info",
    )
