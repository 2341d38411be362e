"""downloadbadge — download-count badges rendered by shields.io.

Normalizes untrusted query parameters, builds the renderer URL, fetches
the badge and falls back to a locally rendered one when the renderer is
unreachable.

Basic usage::

    from downloadbadge import BadgeApp, RubygemsCountResolver

    app = BadgeApp(resolver=RubygemsCountResolver())

Single badge, no web server::

    from downloadbadge import BadgeFetcher, BufferedSink, QueryParams, render_badge

    sink = BufferedSink()
    async with BadgeFetcher() as fetcher:
        await render_badge(QueryParams(b"metric=true"), sink, 1234567, fetcher=fetcher)
"""

__version__ = "0.1.0"
__all__ = [
    "BadgeApp",
    "BadgeConfig",
    "BadgeError",
    "BadgeFetcher",
    "BadgeOptions",
    "BadgeRequest",
    "BadgeState",
    "BadgeStateError",
    "BufferedSink",
    "ConfigurationError",
    "FetchError",
    "LocalBadgeRenderer",
    "NumberFormatter",
    "QueryParams",
    "ResolverError",
    "Response",
    "RubygemsCountResolver",
    "StaticCountResolver",
    "render_badge",
]

# Public name -> (module path, attribute name)
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "BadgeApp": ("downloadbadge.app", "BadgeApp"),
    "BadgeConfig": ("downloadbadge.config", "BadgeConfig"),
    "BadgeError": ("downloadbadge.errors", "BadgeError"),
    "BadgeFetcher": ("downloadbadge.fetch", "BadgeFetcher"),
    "BadgeOptions": ("downloadbadge.options", "BadgeOptions"),
    "BadgeRequest": ("downloadbadge.badge", "BadgeRequest"),
    "BadgeState": ("downloadbadge.badge", "BadgeState"),
    "BadgeStateError": ("downloadbadge.errors", "BadgeStateError"),
    "BufferedSink": ("downloadbadge.sink", "BufferedSink"),
    "ConfigurationError": ("downloadbadge.errors", "ConfigurationError"),
    "FetchError": ("downloadbadge.errors", "FetchError"),
    "LocalBadgeRenderer": ("downloadbadge.fallback", "LocalBadgeRenderer"),
    "NumberFormatter": ("downloadbadge.formatting", "NumberFormatter"),
    "QueryParams": ("downloadbadge.http.query", "QueryParams"),
    "ResolverError": ("downloadbadge.errors", "ResolverError"),
    "Response": ("downloadbadge.http.response", "Response"),
    "RubygemsCountResolver": ("downloadbadge.resolvers", "RubygemsCountResolver"),
    "StaticCountResolver": ("downloadbadge.resolvers", "StaticCountResolver"),
    "render_badge": ("downloadbadge.badge", "render_badge"),
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import downloadbadge`` fast (httpx is only imported when the
    fetcher or app is used) while providing a clean top-level API.
    """
    target = _LAZY_IMPORTS.get(name)
    if target is None:
        msg = f"module 'downloadbadge' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    module_path, attr = target
    return getattr(importlib.import_module(module_path), attr)
