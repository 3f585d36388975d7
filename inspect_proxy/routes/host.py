"""Host descriptor endpoint"""

from fastapi import Depends
from fastapi.responses import JSONResponse

from inspect_proxy.context import AppContext, get_context


async def get_host(context: AppContext = Depends(get_context)):
    """Return the host descriptor resolved at startup"""
    return JSONResponse(content=context.host.to_payload())
