from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from app.models.runtime import Runtime
from validation.validator import Validator, unique

MIN_YEAR = 1888
MAX_TITLE_BYTES = 500
MIN_GENRES = 1
MAX_GENRES = 5


class Movie(BaseModel):
    """
    A stored movie. id, created_at and version belong to the store and are
    only ever set by it.
    """
    id: int = 0
    created_at: Optional[datetime] = None
    title: str = ""
    year: int = 0
    runtime: Runtime = 0
    genres: Optional[List[str]] = None
    version: int = 0

    def to_dict(self) -> Dict[str, Any]:
        exclude = {"created_at"}
        if not self.year:
            exclude.add("year")
        if not self.runtime:
            exclude.add("runtime")
        if not self.genres:
            exclude.add("genres")
        return self.model_dump(mode="json", exclude=exclude)

    def apply(self, changes: "MovieInput") -> None:
        """Copy every field the client actually supplied onto this movie."""
        for name, value in changes.model_dump(exclude_none=True).items():
            setattr(self, name, value)


class MovieInput(BaseModel):
    """
    Request body shape for creating and updating movies. Unknown keys and
    loosely typed values are rejected, null counts as not supplied.
    """
    model_config = ConfigDict(extra="forbid", strict=True)

    title: Optional[str] = None
    year: Optional[int] = None
    runtime: Optional[Runtime] = None
    genres: Optional[List[str]] = None

    def to_movie(self) -> Movie:
        movie = Movie()
        movie.apply(self)
        return movie


def validate_movie(v: Validator, movie: Movie) -> None:
    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title.encode("utf-8")) <= MAX_TITLE_BYTES, "title", "must not be more than 500 bytes long")

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= MIN_YEAR, "year", "must be greater than 1888")
    v.check(movie.year <= datetime.now().year, "year", "must not be in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive integer")

    genres = movie.genres
    v.check(genres is not None, "genres", "must be provided")
    v.check(genres is not None and len(genres) >= MIN_GENRES, "genres", "must contain at least 1 genre")
    v.check(genres is not None and len(genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(unique(genres or []), "genres", "must not contain duplicate values")
