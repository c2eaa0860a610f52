"""
FastAPI server example exposing lexical search over HTTP.

Mirrors how a connector tool handler uses the library: build an index over
freshly loaded records, search it, and hand back a JSON payload.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from lexical_search import LexicalSearchService, ValidationError
from lexical_search.core.exceptions import LexicalSearchError
from lexical_search.core.index import SearchIndex

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Lexical Search API",
    description="BM25 search with fuzzy matching over connector records",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global service instance and prebuilt contact index
search_service: Optional[LexicalSearchService] = None
contact_index: Optional[SearchIndex] = None


class ContactSearchRequest(BaseModel):
    query: str = Field(..., description="Contact name, phone number or note text")
    max_results: int = Field(5, ge=1, le=100, description="Maximum results to return")
    threshold: float = Field(0.1, ge=0.0, description="Minimum score")


class ItemSearchRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(..., description="Records to search")
    query: str = Field("", description="Search query text")
    options: Dict[str, Any] = Field(default_factory=dict, description="Search options (camelCase keys)")


def load_sample_contacts() -> List[Dict[str, Any]]:
    """Load sample contacts for the API."""
    sample_file = Path(__file__).parent / "sample_data" / "contacts.json"

    if not sample_file.exists():
        return []

    with open(sample_file) as f:
        return json.load(f)


@app.on_event("startup")
async def startup_event():
    """Initialize the search service on startup."""
    global search_service, contact_index

    search_service = LexicalSearchService(log_level="INFO")
    contacts = load_sample_contacts()
    contact_index = await search_service.create_index(contacts, {
        "fields": ["name", "phone_number", "notes"]
    })
    logger.info(f"Indexed {len(contacts)} sample contacts")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on shutdown."""
    if search_service:
        await search_service.close()


@app.get("/", summary="API Root")
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Lexical Search API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "contacts": "/contacts/search",
            "search": "/search",
            "stats": "/stats"
        }
    }


@app.get("/stats", summary="Get Statistics")
async def get_stats():
    """Get search service statistics."""
    if not search_service:
        raise HTTPException(status_code=503, detail="Search service not initialized")

    return {
        "service": search_service.get_stats(),
        "contacts": contact_index.get_stats() if contact_index else None
    }


@app.post("/contacts/search", summary="Search Stored Contacts")
async def search_contacts(request: ContactSearchRequest):
    """Search the stored contacts the way a messaging connector does."""
    if not search_service or contact_index is None:
        raise HTTPException(status_code=503, detail="Search service not initialized")

    try:
        results = await search_service.search(contact_index, request.query, {
            "threshold": request.threshold,
            "maxResults": request.max_results
        })
        payload = search_service.results_to_json(
            results,
            query=request.query,
            extra={"source": "stored_contacts"}
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LexicalSearchError as e:
        logger.error(f"Contact search failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(content=payload, media_type="application/json")


@app.post("/search", summary="Search Arbitrary Records")
async def search_items(request: ItemSearchRequest):
    """Index the posted records and search them once."""
    if not search_service:
        raise HTTPException(status_code=503, detail="Search service not initialized")

    try:
        results = await search_service.search_items(request.items, request.query, request.options)
        payload = search_service.results_to_json(results, query=request.query)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LexicalSearchError as e:
        logger.error(f"Search failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(content=payload, media_type="application/json")


def main():
    """Run the API server."""
    print("🚀 Starting Lexical Search API Server...")
    print("📖 API Documentation: http://localhost:8000/docs")
    print("🔍 Contact search: POST http://localhost:8000/contacts/search")
    print("⏹️  Press Ctrl+C to stop")

    uvicorn.run(
        "api_server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
