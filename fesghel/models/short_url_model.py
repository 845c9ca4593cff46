from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    Attributes:
        url (str):
            The original long URL that the key redirects to.
        key (str):
            The unique short identifier of the mapping.

    The persisted document uses exactly the field names `url` and `key`.

    Example:
        >>> short_url = ShortURLModel(url='https://example.com/article/123', key='abc123')
        >>> short_url.to_document()
        {'url': 'https://example.com/article/123', 'key': 'abc123'}
        >>> ShortURLModel.from_document({'_id': 1, 'url': 'https://example.com', 'key': 'abc123'})
        ShortURLModel(url='https://example.com', key='abc123')
    """

    url: str
    key: str

    def to_document(self) -> dict[str, str]:
        """Serialize into the persisted {url, key} document."""
        return {'url': self.url, 'key': self.key}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> 'ShortURLModel':
        """Deserialize a persisted document, ignoring store-specific fields (e.g. `_id`).

        Raises:
            ValueError:
                If `url` or `key` is missing or not a string.
        """
        fields = {}
        for name in ('url', 'key'):
            value = document.get(name)
            if not isinstance(value, str):
                raise ValueError(f"Short URL document field '{name}' must be a string (given value: {value!r}).")
            fields[name] = value
        return cls(**fields)
