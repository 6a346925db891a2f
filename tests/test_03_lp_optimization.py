"""Test FBA and FVA on small networks and on the E. coli core model."""
import fluxspan as fs
from fluxspan.names import *
from fluxspan import InfeasibleError, UnboundedError
from numpy import inf
import pytest


def test_fba_toy(curr_solver, model_toy):
    """FBA routes the full source capacity to the sink."""
    problem = fs.build(model_toy)
    sol = fs.fba(problem, solver=curr_solver)
    assert (sol.status == OPTIMAL)
    assert (sol.objective_value == pytest.approx(10.0))
    assert (sol.fluxes['R3'] == pytest.approx(10.0))
    assert (list(sol.fluxes.index) == ['R1', 'R2', 'R3'])


def test_fva_toy(curr_solver, model_toy):
    problem = fs.build(model_toy)
    res = fs.fva(problem, solver=curr_solver, processes=1)
    assert (list(res.columns) == [MINIMUM, MAXIMUM])
    assert (list(res.index) == ['R1', 'R2', 'R3'])
    for rid in res.index:
        assert (res.loc[rid, MINIMUM] == pytest.approx(0.0, abs=1e-9))
        assert (res.loc[rid, MAXIMUM] == pytest.approx(10.0))


def test_fva_fixed_reaction(curr_solver, model_toy_blocked):
    """A reaction fixed to zero has the range (0, 0) and leaves the others unaffected."""
    problem = fs.build(model_toy_blocked)
    res = fs.fva(problem, solver=curr_solver, reactions=['R4', 'R1'], processes=1)
    assert (res.loc['R4', MINIMUM] == pytest.approx(0.0, abs=1e-9))
    assert (res.loc['R4', MAXIMUM] == pytest.approx(0.0, abs=1e-9))
    assert (res.loc['R1', MAXIMUM] == pytest.approx(10.0))
    assert (list(res.index) == ['R4', 'R1'])


def test_fva_targets(curr_solver, model_toy):
    problem = fs.build(model_toy)
    res = fs.fva(problem, solver=curr_solver, reactions=['R2', 'R2'], processes=1)
    assert (list(res.index) == ['R2'])
    res = fs.fva(problem, solver=curr_solver, reactions='R3', processes=1)
    assert (list(res.index) == ['R3'])
    res = fs.fva(problem, solver=curr_solver, reactions=[], processes=1)
    assert (res.empty)
    assert (list(res.columns) == [MINIMUM, MAXIMUM])
    with pytest.raises(ValueError):
        fs.fva(problem, solver=curr_solver, reactions=['R1', 'R99'], processes=1)


def test_infeasible(curr_solver, model_infeasible):
    problem = fs.build(model_infeasible)
    with pytest.raises(InfeasibleError):
        fs.fba(problem, solver=curr_solver)
    with pytest.raises(InfeasibleError):
        fs.fva(problem, solver=curr_solver, processes=1)
    # the fixed reaction is solved as well, not skipped
    with pytest.raises(InfeasibleError):
        fs.fva(problem, solver=curr_solver, reactions=['R4'], processes=1)


def test_unbounded(curr_solver, model_unbounded):
    problem = fs.build(model_unbounded)
    with pytest.raises(UnboundedError):
        fs.fba(problem, solver=curr_solver)
    with pytest.raises(UnboundedError):
        fs.fva(problem, solver=curr_solver, processes=1)


def test_fva_max_covers_fba(curr_solver, model_branched):
    problem = fs.build(model_branched)
    sol = fs.fba(problem, solver=curr_solver)
    assert (sol.objective_value == pytest.approx(5.0))
    res = fs.fva(problem, solver=curr_solver, reactions=['R_BM_ex'], processes=1)
    assert (res.loc['R_BM_ex', MAXIMUM] >= sol.objective_value - 1e-9)


def test_fva_branched(curr_solver, model_branched):
    problem = fs.build(model_branched)
    res = fs.fva(problem, solver=curr_solver, processes=1)
    assert (res.loc['R_AB', MINIMUM] == pytest.approx(-10.0))
    assert (res.loc['R_AB', MAXIMUM] == pytest.approx(10.0))
    assert (res.loc['R_P_ex', MAXIMUM] == pytest.approx(10.0))
    assert (res.loc['R_BM', MAXIMUM] == pytest.approx(5.0))


def test_fraction_of_optimum(curr_solver, model_branched):
    """With the objective pinned to its optimum, no by-product can be formed."""
    problem = fs.build(model_branched)
    res = fs.fva(problem, solver=curr_solver, processes=1, fraction_of_optimum=1.0)
    assert (res.loc['R_BM_ex', MINIMUM] == pytest.approx(5.0))
    assert (res.loc['R_BM_ex', MAXIMUM] == pytest.approx(5.0))
    assert (res.loc['R_P_ex', MAXIMUM] == pytest.approx(0.0, abs=1e-7))
    assert (res.loc['R_AB', MINIMUM] == pytest.approx(0.0, abs=1e-7))
    res = fs.fva(problem, solver=curr_solver, processes=1, fraction_of_optimum=0.5, reactions=['R_P_ex'])
    assert (res.loc['R_P_ex', MAXIMUM] == pytest.approx(5.0))
    with pytest.raises(ValueError):
        fs.fva(problem, solver=curr_solver, processes=1, fraction_of_optimum=1.5)


def test_fba_idempotent(curr_solver, model_branched):
    problem = fs.build(model_branched)
    c, lb, ub = problem.c, problem.lb, problem.ub
    A_eq = problem.A_eq.copy()
    sol1 = fs.fba(problem, solver=curr_solver)
    fs.fva(problem, solver=curr_solver, processes=1)
    sol2 = fs.fba(problem, solver=curr_solver)
    assert (sol1.objective_value == pytest.approx(sol2.objective_value))
    assert (list(sol1.fluxes) == pytest.approx(list(sol2.fluxes)))
    assert (problem.c == c and problem.lb == lb and problem.ub == ub)
    assert ((problem.A_eq != A_eq).nnz == 0)


def test_fba_options(curr_solver, model_toy):
    problem = fs.build(model_toy)
    sol = fs.fba(problem, solver=curr_solver, constraints='R3 <= 4')
    assert (sol.objective_value == pytest.approx(4.0))
    sol = fs.fba(problem, solver=curr_solver, constraints=[[{'R1': 1.0}, '=', 2.5]])
    assert (sol.objective_value == pytest.approx(2.5))
    sol = fs.fba(problem, solver=curr_solver, obj='R1', obj_sense='min')
    assert (sol.objective_value == pytest.approx(0.0, abs=1e-9))
    sol = fs.fba(problem, solver=curr_solver, obj={'R2': 2.0}, obj_sense=MAXIMIZE)
    assert (sol.objective_value == pytest.approx(20.0))
    with pytest.raises(ValueError):
        fs.fba(problem, solver=curr_solver, obj_sense='sideways')


def test_fva_constraints(curr_solver, model_toy):
    problem = fs.build(model_toy)
    res = fs.fva(problem, solver=curr_solver, processes=1, constraints='R2 >= 3, R1 <= 6')
    assert (res.loc['R3', MINIMUM] == pytest.approx(3.0))
    assert (res.loc['R3', MAXIMUM] == pytest.approx(6.0))


def test_fba_model_descriptors(curr_solver, model_toy, model_toy_cobra):
    """Models are built on the fly."""
    assert (fs.fba(model_toy, solver=curr_solver).objective_value == pytest.approx(10.0))
    assert (fs.fba(model_toy_cobra, solver=curr_solver).objective_value == pytest.approx(10.0))


def test_textbook_fba(curr_solver, model_textbook):
    sol = fs.fba(model_textbook, solver=curr_solver)
    assert (sol.objective_value == pytest.approx(0.8739, abs=1e-4))


@pytest.mark.timeout(300)
def test_textbook_fva_like_cobra(curr_solver, model_textbook):
    from cobra.flux_analysis import flux_variability_analysis
    reactions = ['PGI', 'PFK', 'EX_o2_e', 'EX_ac_e', 'ACKr', 'ATPM', 'Biomass_Ecoli_core', 'FUM', 'ME1', 'PPCK']
    ref = flux_variability_analysis(model_textbook, reaction_list=reactions, fraction_of_optimum=0.0, processes=1)
    res = fs.fva(model_textbook, solver=curr_solver, reactions=reactions, processes=1)
    for rid in reactions:
        assert (res.loc[rid, MINIMUM] == pytest.approx(ref.loc[rid, MINIMUM], abs=1e-5))
        assert (res.loc[rid, MAXIMUM] == pytest.approx(ref.loc[rid, MAXIMUM], abs=1e-5))


def test_sequential_fva_keeps_caller_state(curr_solver, model_toy):
    """Without a pool, no worker state remains in the calling process."""
    import sys
    import fluxspan.flux_analysis as flux_analysis
    stdout = sys.stdout
    res = fs.fva(fs.build(model_toy), solver=curr_solver, processes=1)
    assert (res.loc['R1', MAXIMUM] == pytest.approx(10.0))
    assert (not hasattr(flux_analysis, 'lp_glob'))
    assert (sys.stdout is stdout)
