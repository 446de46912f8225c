import dataclasses
from typing import Iterator, NewType, Optional

# A specific really existing addressable namespace (at least, the one assumed to be so).
# Made as a NewType for stricter type-checking to avoid collisions with other strings.
NamespaceName = NewType('NamespaceName', str)

# A namespace reference usable in the API calls. `None` means cluster-wide API calls.
Namespace = Optional[NamespaceName]


@dataclasses.dataclass(frozen=True)
class Resource:
    """
    A reference to a very specific custom resource type.

    Together with a namespace (for the namespaced resources) and a name,
    it identifies one individual object in the cluster.
    """

    group: str
    """
    The resource's API group; e.g. ``"openebs.io"``, ``"example.com"``.
    For Core v1 API resources, an empty string: ``""``.
    """

    version: str
    """
    The resource's API version; e.g. ``"v1"``, ``"v1alpha1"``, etc.
    """

    plural: str
    """
    The resource's plural name; e.g. ``"mayastorpools"``.
    It is used as an API endpoint, together with API group & version.
    """

    namespaced: bool = True
    """
    Whether the resource is namespaced (``True``) or cluster-scoped (``False``).
    """

    def __repr__(self) -> str:
        return f'{self.plural}.{self.version}.{self.group}'.strip('.')

    # Mostly for tests, to be used as `Resource(*resource)`.
    def __iter__(self) -> Iterator[str]:
        return iter((self.group, self.version, self.plural))

    @property
    def api_version(self) -> str:
        return f'{self.group}/{self.version}' if self.group else self.version

    def get_url(
            self,
            *,
            namespace: Namespace,
            name: str,
    ) -> str:
        """
        Build a URL of one individual object, relative to the API server's root.

        Namespaced resources require a non-empty namespace;
        cluster-scoped resources prohibit any namespace.
        """
        if not self.namespaced and namespace is not None:
            raise ValueError("Specific namespaces are not supported for cluster-scoped resources.")
        if self.namespaced and not namespace:
            raise ValueError("Specific namespaces are required for specific namespaced resources.")
        if not name:
            raise ValueError("Object names must be non-empty.")

        root = '/api' if self.group == '' else f'/apis/{self.group}'
        scope = f'/namespaces/{namespace}' if namespace is not None else ''
        return f'{root}/{self.version}{scope}/{self.plural}/{name}'
