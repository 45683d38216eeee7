from multiple_finders.package2.repository import MyRepository


class MyController:

    def __init__(self, repository: MyRepository) -> None:
        self.repository = repository
