"""Test FVA on a process pool."""
import fluxspan as fs
from fluxspan.names import *
from fluxspan import InfeasibleError
import pytest


@pytest.mark.timeout(600)
def test_fva_processes_agree(curr_solver, model_chain):
    """FVA with one and several processes returns the same flux ranges."""
    problem = fs.build(model_chain)
    res_seq = fs.fva(problem, solver=curr_solver, processes=1)
    res_par = fs.fva(problem, solver=curr_solver, processes=3)
    assert (list(res_par.index) == list(res_seq.index))
    for col in [MINIMUM, MAXIMUM]:
        assert (list(res_par[col]) == pytest.approx(list(res_seq[col]), abs=1e-7))
    assert (res_par.loc['EX_out', MAXIMUM] == pytest.approx(10.0))
    assert (res_par.loc['R0', MINIMUM] == pytest.approx(0.0, abs=1e-7))
    assert (res_par.loc['R0', MAXIMUM] == pytest.approx(8.0))
    assert (res_par.loc['B5', MINIMUM] == pytest.approx(-2.0))
    assert (res_par.loc['B5', MAXIMUM] == pytest.approx(5.0))


@pytest.mark.timeout(600)
def test_fva_pool_with_fraction(curr_solver, model_chain):
    problem = fs.build(model_chain)
    res = fs.fva(problem, solver=curr_solver, processes=2, fraction_of_optimum=1.0, reactions=['B3', 'R3', 'EX_in'])
    assert (res.loc['EX_in', MINIMUM] == pytest.approx(10.0))
    assert (res.loc['B3', MINIMUM] == pytest.approx(2.0))
    assert (res.loc['R3', MINIMUM] == pytest.approx(5.0))
    assert (res.loc['R3', MAXIMUM] == pytest.approx(8.0))


@pytest.mark.timeout(600)
def test_fva_pool_aborts(curr_solver, model_infeasible):
    """The first failing reaction aborts the pooled FVA."""
    problem = fs.build(model_infeasible)
    with pytest.raises(InfeasibleError):
        fs.fva(problem, solver=curr_solver, processes=2)


@pytest.mark.timeout(600)
def test_fva_pool_unbounded(curr_solver, model_unbounded):
    problem = fs.build(model_unbounded)
    with pytest.raises(fs.UnboundedError):
        fs.fva(problem, solver=curr_solver, processes=2)
