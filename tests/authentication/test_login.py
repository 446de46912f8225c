import logging

import pytest

from fingard._cogs.structs.credentials import ConnectionInfo, LoginError
from fingard._core.intents import piggybacking

SA_INFO = ConnectionInfo(server='https://kubernetes.default.svc', token='sa')
KC_INFO = ConnectionInfo(server='https://localhost:6443', token='kc')


@pytest.fixture()
def sources(mocker):
    mocks = mocker.Mock()
    mocks.login_sa = mocker.patch.object(piggybacking, 'login_with_service_account',
                                         return_value=None)
    mocks.login_kc = mocker.patch.object(piggybacking, 'login_with_kubeconfig',
                                         return_value=None)
    return mocks


def test_service_account_is_preferred(sources, logger):
    sources.login_sa.return_value = SA_INFO
    sources.login_kc.return_value = KC_INFO
    info = piggybacking.login(logger=logger)
    assert info is SA_INFO
    assert not sources.login_kc.called


def test_kubeconfig_is_used_without_service_account(sources, logger):
    sources.login_kc.return_value = KC_INFO
    info = piggybacking.login(logger=logger)
    assert info is KC_INFO
    assert sources.login_sa.called


def test_login_success_is_logged(sources, logger, caplog):
    sources.login_kc.return_value = KC_INFO
    piggybacking.login(logger=logger)
    assert caplog.records[-1].levelno == logging.DEBUG
    assert 'kubeconfig' in caplog.records[-1].getMessage()


def test_login_fails_without_sources(sources, logger):
    with pytest.raises(LoginError) as err:
        piggybacking.login(logger=logger)
    assert 'Cannot authenticate' in str(err.value)


def test_login_errors_are_escalated(sources, logger):
    sources.login_kc.side_effect = LoginError('Context is broken.')
    with pytest.raises(LoginError) as err:
        piggybacking.login(logger=logger)
    assert str(err.value) == 'Context is broken.'
