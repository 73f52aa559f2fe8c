"""Domain name / ID resolution.

Commands accept a domain either by its API ID or by its DNS name. The API
has no lookup-by-name endpoint, so resolution lists every domain and
matches locally. The list is fetched at most once per resolver, and a
resolver lives for a single CLI invocation.
"""

from typing import Any, Callable, Dict, List, Optional

from ..exceptions import DomainNotFoundError, DomainResolutionError, MailerSendCLIError

DomainLister = Callable[[], List[Dict[str, Any]]]


def looks_like_domain_name(value: str) -> bool:
    """DNS names contain a dot; domain IDs never do."""
    return "." in value


class DomainResolver:
    """Translates between domain IDs and domain names."""

    def __init__(self, list_domains: DomainLister) -> None:
        """Initialize the resolver.

        Args:
            list_domains: Returns every domain of the account
        """
        self._list_domains = list_domains
        self._domains: Optional[List[Dict[str, Any]]] = None

    def _all_domains(self) -> List[Dict[str, Any]]:
        if self._domains is None:
            try:
                self._domains = self._list_domains()
            except MailerSendCLIError as e:
                raise DomainResolutionError(e) from e
        return self._domains

    def resolve_id(self, value: str) -> str:
        """Return the domain ID for an ID or DNS name.

        Raises:
            DomainNotFoundError: If no domain has that name
        """
        if not looks_like_domain_name(value):
            return value

        wanted = value.lower()
        for domain in self._all_domains():
            if str(domain.get("name", "")).lower() == wanted:
                return str(domain["id"])

        raise DomainNotFoundError(f'domain "{value}" not found')

    def resolve_name(self, value: str) -> str:
        """Return the DNS name for an ID or DNS name.

        Raises:
            DomainNotFoundError: If no domain has that ID
        """
        if looks_like_domain_name(value):
            return value

        for domain in self._all_domains():
            if str(domain.get("id", "")) == value:
                return str(domain["name"])

        raise DomainNotFoundError(f'domain ID "{value}" not found')
