from typing import List

from ..base import AbstractRepository
from .repository import MyRepository
from .row_mapper import MyRepositoryRowMapper


class MyRepositoryImpl(AbstractRepository, MyRepository):

    def __init__(self) -> None:
        self.row_mapper: MyRepositoryRowMapper = MyRepositoryRowMapper()

    def connect(self) -> None:
        pass

    def find_all(self) -> List[str]:
        return [self.row_mapper.map_row(row) for row in ()]
