"""Redis key layout of short URL records

    [<prefix>:]links:<key>  ->  '{"url": "...", "key": "..."}'
"""

LINKS_NAMESPACE = 'links'


class RedisKeySchema:
    """Build namespaced Redis key names.

    A prefix such as "fesghel:prod" keeps several apps and environments
    sharing one Redis database apart. Without a prefix, names are bare.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    def _namespaced(self, *parts: str) -> str:
        name = ':'.join(parts)
        return name if self.prefix is None else f'{self.prefix}:{name}'

    def link_key(self, key: str) -> str:
        return self._namespaced(LINKS_NAMESPACE, key)
