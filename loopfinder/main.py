from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from loopfinder.config import settings
from loopfinder.models.request import GenerateRoutesRequest
from loopfinder.models.response import ErrorResponse, RouteResponse
from loopfinder.services.route.response_builder import ResponseBuilderService
from loopfinder.services.route_service import RouteService, UnsupportedModeError
from loopfinder.services.routing.errors import ProviderConfigurationError
from loopfinder.utils import get_logger

logger = get_logger("main")

app = FastAPI(
    title="Loopfinder API",
    description="Loop route generation for running and cycling",
    version=settings.api_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

route_service = RouteService()
response_builder = ResponseBuilderService()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.post(
    "/api/routes/generate",
    response_model=RouteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing origin or unsupported mode"},
        500: {"model": ErrorResponse, "description": "Routing provider not configured"},
    },
)
async def generate_routes(request: GenerateRoutesRequest):
    """Generate loop routes around a start point, grouped by distance category"""
    if not request.has_origin():
        return _error(400, "lat and lng are required")

    try:
        result = await route_service.generate_routes(
            lat=request.lat,
            lng=request.lng,
            mode=request.mode,
            quiet=request.quiet,
            exclude_bearings=request.exclude_bearings,
        )
    except UnsupportedModeError as e:
        return _error(400, str(e))
    except ProviderConfigurationError as e:
        logger.error(f"Routing provider unavailable: {e}")
        return _error(500, str(e))

    return response_builder.build_response(result, route_service.table)


@app.get("/health")
async def health_check():
    """Health check"""
    return {"status": "healthy", "version": settings.api_version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
