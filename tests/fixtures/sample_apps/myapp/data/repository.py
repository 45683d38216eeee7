from typing import List, Protocol

from myapp.markers import component


@component(description="Stores things")
class MyRepository(Protocol):

    def find_all(self) -> List[str]:
        ...
