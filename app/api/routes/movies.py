import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from app.api.decoding import decode_json, max_body_bytes, read_body
from app.core.exceptions import BadRequestError, EditConflictError, FailedValidationError, RecordNotFoundError
from app.models.api_response import MovieEnvelope
from app.models.movie import Movie, MovieInput, validate_movie
from validation.validator import Validator

router = APIRouter()

# ids are SQLite INTEGERs
MAX_ID = 2 ** 63 - 1


def read_id_param(raw: str) -> int:
    # a bad id is reported as a missing resource, not a bad request
    if not (raw.isascii() and raw.isdigit()):
        raise RecordNotFoundError()
    id = int(raw)
    if id < 1 or id > MAX_ID:
        raise RecordNotFoundError()
    return id


def _validated(movie: Movie) -> Movie:
    v = Validator()
    validate_movie(v, movie)
    if not v.valid():
        raise FailedValidationError(v.errors)
    return movie


def _movie_response(movie: Movie, status_code: int = 200, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MovieEnvelope(movie=movie.to_dict()).model_dump(),
        headers=headers,
    )


@router.post("")
def create_movie(request: Request, body: bytes = Depends(read_body)):
    data = decode_json(body, MovieInput, max_bytes=max_body_bytes(request))
    movie = _validated(data.to_movie())

    store = request.app.state.movie_store
    store.insert(movie)
    logging.info("created movie id=%s", movie.id)

    return _movie_response(movie, status_code=201, headers={"Location": f"/v1/movies/{movie.id}"})


@router.get("/{id}")
def show_movie(request: Request, id: str):
    store = request.app.state.movie_store
    movie = store.get(read_id_param(id))
    return _movie_response(movie)


@router.put("/{id}")
@router.patch("/{id}")
def update_movie(
    request: Request,
    id: str,
    body: bytes = Depends(read_body),
    expected_version: Optional[str] = Header(default=None, alias="X-Expected-Version"),
):
    """
    Apply the supplied fields to the stored movie and write it back.

    The write only lands if nobody else updated the movie between our read
    and our write. Without X-Expected-Version that is the only protection:
    a client that read an older version in an earlier request overwrites
    newer changes. Sending the header pins the version the client last saw.
    """
    store = request.app.state.movie_store
    movie = store.get(read_id_param(id))

    if expected_version is not None:
        try:
            expected = int(expected_version)
        except ValueError:
            raise BadRequestError("X-Expected-Version header must be an integer")
        if expected != movie.version:
            raise EditConflictError()

    changes = decode_json(body, MovieInput, max_bytes=max_body_bytes(request))
    movie.apply(changes)
    _validated(movie)

    store.update(movie)
    logging.info("updated movie id=%s to version=%s", movie.id, movie.version)

    return _movie_response(movie)


@router.delete("/{id}", status_code=204)
def delete_movie(request: Request, id: str):
    store = request.app.state.movie_store
    store.delete(read_id_param(id))
    logging.info("deleted movie id=%s", id)
    return Response(status_code=204)
