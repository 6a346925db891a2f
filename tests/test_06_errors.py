"""Test the exception hierarchy and the translation of solver status codes."""
import pickle
from fluxspan.names import *
from fluxspan import (raise_for_status, FluxSpanError, ConstructionError, SolverError, InfeasibleError, UnboundedError,
                      BackendError, TimeLimitError)
import pytest


def test_hierarchy():
    assert (issubclass(ConstructionError, FluxSpanError))
    assert (issubclass(InfeasibleError, SolverError))
    assert (issubclass(UnboundedError, SolverError))
    assert (issubclass(TimeLimitError, BackendError))
    assert (not issubclass(ConstructionError, SolverError))


def test_errors_pickle():
    """Errors must survive the way back from pool workers."""
    for err_type in [ConstructionError, InfeasibleError, UnboundedError, BackendError, TimeLimitError]:
        err = pickle.loads(pickle.dumps(err_type('FVA: something went wrong.')))
        assert (type(err) is err_type)
        assert (str(err) == 'FVA: something went wrong.')


def test_raise_for_status():
    assert (raise_for_status(OPTIMAL) is None)
    with pytest.raises(InfeasibleError, match='^FBA: problem is infeasible'):
        raise_for_status(INFEASIBLE, 'FBA')
    with pytest.raises(UnboundedError):
        raise_for_status(UNBOUNDED)
    with pytest.raises(TimeLimitError):
        raise_for_status(TIME_LIMIT)
    with pytest.raises(BackendError):
        raise_for_status(ERROR)
