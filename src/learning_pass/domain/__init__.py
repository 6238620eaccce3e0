"""Learning Pass domain layer.

The domain package hosts the customer validator, the note hook registry and the
Symphony flat serializer. Domain modules depend on the standard library,
pydantic and the cleansing rules only; configuration loading and file output
are injected by the CLI or the calling service.
"""
