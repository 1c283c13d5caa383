"""
Image route.

GET/HEAD <IMAGE_ROUTE_PATH>?url=...&w=...&format=...

The mount path is configurable, so the router is built by a factory rather
than declared at import time.
"""

from fastapi import APIRouter, Request, Response

from pixelcache.api.dependencies import ImageHandlerDep


async def serve_image(request: Request, handler: ImageHandlerDep) -> Response:
    """
    Transform (or serve from cache) the image described by the query string.

    HTTP Status Codes:
        200: Image (GET) or headers only (HEAD)
        304: If-None-Match matched the current ETag
        400: Invalid parameters or no source
        403: Source host not allowed
        500: Fetch, decode or encode failure
    """
    result = await handler.handle(request.method, request.query_params, request.headers)
    return Response(content=result.body, status_code=result.status, headers=result.headers)


def create_image_router(path: str = "/image") -> APIRouter:
    router = APIRouter(tags=["Images"])
    router.add_api_route(
        path,
        serve_image,
        methods=["GET", "HEAD"],
        response_class=Response,
        summary="Transform an image",
    )
    return router
