import pytest

from fingard._cogs.structs.references import Resource


def test_creation_with_no_args():
    with pytest.raises(TypeError):
        Resource()


def test_creation_with_all_kwargs():
    resource = Resource(
        group='group',
        version='version',
        plural='plural',
        namespaced=False,
    )
    assert resource.group == 'group'
    assert resource.version == 'version'
    assert resource.plural == 'plural'
    assert resource.namespaced == False


def test_namespaced_by_default():
    resource = Resource('group', 'version', 'plural')
    assert resource.namespaced == True


def test_immutability():
    resource = Resource('group', 'version', 'plural')
    with pytest.raises(AttributeError):
        resource.plural = 'others'  # type: ignore


def test_iteration_for_positional_args():
    resource = Resource('group', 'version', 'plural')
    assert list(resource) == ['group', 'version', 'plural']


@pytest.mark.parametrize('group, version, expected', [
    pytest.param('openebs.io', 'v1alpha1', 'openebs.io/v1alpha1', id='custom'),
    pytest.param('', 'v1', 'v1', id='core'),
])
def test_api_version(group, version, expected):
    resource = Resource(group, version, 'plural')
    assert resource.api_version == expected


def test_repr():
    resource = Resource('openebs.io', 'v1alpha1', 'mayastorpools')
    assert repr(resource) == 'mayastorpools.v1alpha1.openebs.io'


def test_url_for_a_clusterscoped_object():
    resource = Resource('group', 'version', 'plural', namespaced=False)
    url = resource.get_url(namespace=None, name='name-a.b')
    assert url == '/apis/group/version/plural/name-a.b'


def test_url_for_a_namespaced_object():
    resource = Resource('group', 'version', 'plural', namespaced=True)
    url = resource.get_url(namespace='ns-a.b', name='name-a.b')
    assert url == '/apis/group/version/namespaces/ns-a.b/plural/name-a.b'


def test_url_for_a_core_object():
    resource = Resource('', 'v1', 'pods', namespaced=True)
    url = resource.get_url(namespace='ns-a.b', name='name-a.b')
    assert url == '/api/v1/namespaces/ns-a.b/pods/name-a.b'


@pytest.mark.parametrize('namespace', ['ns', ''])
def test_url_for_a_clusterscoped_object_in_a_namespace(namespace):
    resource = Resource('group', 'version', 'plural', namespaced=False)
    with pytest.raises(ValueError) as err:
        resource.get_url(namespace=namespace, name='name')
    assert str(err.value) == "Specific namespaces are not supported for cluster-scoped resources."


@pytest.mark.parametrize('namespace', [None, ''], ids=['none', 'empty'])
def test_url_for_a_namespaced_object_without_a_namespace(namespace):
    resource = Resource('group', 'version', 'plural', namespaced=True)
    with pytest.raises(ValueError) as err:
        resource.get_url(namespace=namespace, name='name')
    assert str(err.value) == "Specific namespaces are required for specific namespaced resources."


def test_url_for_an_object_without_a_name():
    resource = Resource('group', 'version', 'plural', namespaced=True)
    with pytest.raises(ValueError):
        resource.get_url(namespace='ns', name='')
