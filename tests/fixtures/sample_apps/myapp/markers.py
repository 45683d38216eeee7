def component(cls=None, *, description="", technology=""):
    """Mark a class as an architectural component."""

    def mark(target):
        target.__component__ = {"description": description, "technology": technology}
        return target

    if cls is None:
        return mark
    return mark(cls)
