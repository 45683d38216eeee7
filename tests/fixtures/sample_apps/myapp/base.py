from abc import ABC, abstractmethod


class AbstractComponent(ABC):

    @abstractmethod
    def name(self) -> str:
        ...


class AbstractRepository(ABC):

    @abstractmethod
    def connect(self) -> None:
        ...
