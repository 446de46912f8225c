"""
Credentials from where they usually are: the pod's service account or a kubeconfig.

Only the static credentials are read (tokens, certificates, passwords).
Nothing is executed or requested to obtain them, so the kubeconfigs with
exec plugins or cloud auth-providers are not supported.

.. seealso::
    :mod:`credentials` for the resulting structures.
"""
import os
from typing import Any, Optional

import yaml

from fingard._cogs.helpers import typedefs
from fingard._cogs.structs import credentials

# As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
SERVICE_ACCOUNT_DIR = '/var/run/secrets/kubernetes.io/serviceaccount'
IN_CLUSTER_SERVER = 'https://kubernetes.default.svc'
DEFAULT_KUBECONFIG = '~/.kube/config'


def login(
        *,
        logger: typedefs.Logger,
) -> credentials.ConnectionInfo:
    """
    Get the credentials of the service account if in a pod, or of the kubeconfig otherwise.
    """
    info = login_with_service_account()
    if info is not None:
        logger.debug("Logged in with the in-cluster service account.")
        return info

    info = login_with_kubeconfig()
    if info is not None:
        logger.debug("Logged in with the kubeconfig.")
        return info

    raise credentials.LoginError("Cannot authenticate: no service account and no kubeconfig.")


def login_with_service_account() -> Optional[credentials.ConnectionInfo]:
    """ Read the mounted service account, or return ``None`` if not in a pod. """
    token = _read_secret('token')
    if token is None:
        return None

    ca_path = os.path.join(SERVICE_ACCOUNT_DIR, 'ca.crt')
    return credentials.ConnectionInfo(
        server=IN_CLUSTER_SERVER,
        token=token or None,
        default_namespace=_read_secret('namespace') or None,
        ca_path=ca_path if os.path.exists(ca_path) else None,
    )


def _read_secret(filename: str) -> Optional[str]:
    path = os.path.join(SERVICE_ACCOUNT_DIR, filename)
    if not os.path.exists(path):
        return None
    with open(path, encoding='utf-8') as f:
        return f.read().strip()


def get_kubeconfig_path() -> Optional[str]:
    """
    The first path in ``$KUBECONFIG`` if set, or the default kubeconfig if it exists.

    Unlike ``kubectl``, several kubeconfigs in ``$KUBECONFIG`` are not merged.
    """
    paths = [path.strip() for path in os.environ.get('KUBECONFIG', '').split(os.pathsep)]
    paths = [path for path in paths if path]
    if paths:
        return os.path.expanduser(paths[0])
    default = os.path.expanduser(DEFAULT_KUBECONFIG)
    return default if os.path.exists(default) else None


def login_with_kubeconfig() -> Optional[credentials.ConnectionInfo]:
    """
    Read the current context of the kubeconfig, or return ``None`` if there is none.

    A kubeconfig that exists but cannot be used (no current context,
    no server) fails with :class:`credentials.LoginError`; unreadable
    or malformed files fail with the I/O and YAML errors as usual.
    """
    path = get_kubeconfig_path()
    if path is None:
        return None

    with open(path, encoding='utf-8') as f:
        config = yaml.safe_load(f.read()) or {}

    current = config.get('current-context')
    if not current:
        raise credentials.LoginError(f"No current context is set in {path}.")
    context = _find_named(config, 'contexts', 'context', current)
    if context is None:
        raise credentials.LoginError(f"Context {current!r} is not found in {path}.")
    cluster = _find_named(config, 'clusters', 'cluster', context.get('cluster')) or {}
    user = _find_named(config, 'users', 'user', context.get('user')) or {}
    if not cluster.get('server'):
        raise credentials.LoginError(f"Context {current!r} has no cluster server in {path}.")

    return credentials.ConnectionInfo(
        server=cluster['server'],
        ca_path=cluster.get('certificate-authority'),
        ca_data=cluster.get('certificate-authority-data'),
        insecure=cluster.get('insecure-skip-tls-verify'),
        certificate_path=user.get('client-certificate'),
        certificate_data=user.get('client-certificate-data'),
        private_key_path=user.get('client-key'),
        private_key_data=user.get('client-key-data'),
        username=user.get('username'),
        password=user.get('password'),
        token=user.get('token'),
        default_namespace=context.get('namespace'),
    )


def _find_named(config: dict[str, Any], section: str, field: str, name: Any) -> Optional[dict[str, Any]]:
    # Kubeconfig sections are lists of {name: ..., <field>: {...}}, e.g. {name: ctx, context: {...}}.
    for item in config.get(section) or []:
        if item.get('name') == name:
            return item.get(field) or {}
    return None
