"""
Wire schemas for the remote character collection.
Pydantic models validate the JSON the collection returns before it becomes domain objects.
"""

from typing import Any, Dict, List, Optional, Union  # precise typing for clarity

# Pydantic validates and coerces the loosely-typed JSON payloads
from pydantic import BaseModel, ConfigDict, Field  # schema definitions


# Pydantic model for one character record as served by the collection
class CharacterRecord(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")

	id: int = Field(alias="_id")  # unique id (served as "_id")
	name: str  # display name
	image_url: Optional[str] = Field(default=None, alias="imageUrl")  # portrait URL, may be missing
	films: List[str] = Field(default_factory=list)  # feature films
	short_films: List[str] = Field(default_factory=list, alias="shortFilms")  # short films
	tv_shows: List[str] = Field(default_factory=list, alias="tvShows")  # TV shows
	video_games: List[str] = Field(default_factory=list, alias="videoGames")  # video games
	park_attractions: List[str] = Field(default_factory=list, alias="parkAttractions")  # park attractions
	allies: List[str] = Field(default_factory=list)  # allies
	enemies: List[str] = Field(default_factory=list)  # enemies
	source_url: Optional[str] = Field(default=None, alias="sourceUrl")  # wiki page
	url: Optional[str] = None  # canonical record URL


# Pydantic model for the pagination block of a response
class PageInfo(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")

	count: int = 0  # records on this page
	total_pages: int = Field(default=1, alias="totalPages")  # pages available for this query
	previous_page: Optional[str] = Field(default=None, alias="previousPage")  # previous page URL
	next_page: Optional[str] = Field(default=None, alias="nextPage")  # next page URL


# Pydantic model for the complete response payload
class CollectionResponse(BaseModel):
	model_config = ConfigDict(extra="ignore")

	info: PageInfo = Field(default_factory=PageInfo)  # pagination metadata
	data: Union[List[Any], Dict[str, Any]] = Field(default_factory=list)  # one record or many (bad entries skipped later)
