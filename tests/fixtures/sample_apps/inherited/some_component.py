from inherited.base import Loggable


class SomeComponent(Loggable):

    def do_something(self) -> None:
        self.logging_component.log("doing something")
