from pg_arraycodec import ConversionContext

#: Anything at or above this uses hex format bytea.
MODERN_SERVER_VERSION = 160002
LEGACY_SERVER_VERSION = 80407


def make_context(**kwargs) -> ConversionContext:
    kwargs.setdefault("server_version", MODERN_SERVER_VERSION)
    return ConversionContext(**kwargs)
