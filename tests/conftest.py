import pytest
from numpy import inf
from fluxspan.names import *
from fluxspan import MetabolicModel, Reaction, Species

# HiGHS ships with scipy and GLPK with cobra (swiglpk)
solvers = [GLPK, HIGHS]

# Add SCIP to the list if the pyscipopt package is installed
try:
    import pyscipopt
    solvers.append(SCIP)
except ImportError:
    pass  # SCIP is not installed


@pytest.fixture(params=solvers, scope="session")
def curr_solver(request: pytest.FixtureRequest) -> str:
    """Provide session-level fixture for parametrized solver names."""
    return request.param


@pytest.fixture
def model_toy():
    """Two species, source -> S1 -> S2 -> sink, the sink is the objective."""
    return MetabolicModel('toy', ['S1', 'S2'], [
        Reaction('R1', {'S1': -1, 'S2': 1}, 0, 10),
        Reaction('R2', {'S1': 1}, 0, 10),
        Reaction('R3', {'S2': -1}, 0, 10, objective_coefficient=1),
    ])


@pytest.fixture
def model_toy_blocked():
    """Toy network with an additional conversion that is fixed to zero."""
    return MetabolicModel('toy_blocked', ['S1', 'S2'], [
        Reaction('R1', {'S1': -1, 'S2': 1}, 0, 10),
        Reaction('R2', {'S1': 1}, 0, 10),
        Reaction('R3', {'S2': -1}, 0, 10, objective_coefficient=1),
        Reaction('R4', {'S1': -1, 'S2': 1}, 0, 0),
    ])


@pytest.fixture
def model_infeasible():
    """Toy network whose sink demands more than the source can supply."""
    return MetabolicModel('toy_infeasible', ['S1', 'S2'], [
        Reaction('R1', {'S1': -1, 'S2': 1}, 0, 10),
        Reaction('R2', {'S1': 1}, 0, 10),
        Reaction('R3', {'S2': -1}, 11, 20, objective_coefficient=1),
        Reaction('R4', {'S1': -1, 'S2': 1}, 0, 0),
    ])


@pytest.fixture
def model_unbounded():
    """A free cycle between two species that carries the objective."""
    return MetabolicModel('cycle', ['A', 'B'], [
        Reaction('Rf', {'A': -1, 'B': 1}, -inf, inf, objective_coefficient=1),
        Reaction('Rb', {'A': 1, 'B': -1}, -inf, inf),
    ])


@pytest.fixture
def model_branched():
    """Substrate uptake splits into two pathways that produce biomass and a by-product."""
    return MetabolicModel('branched', ['S', 'A', 'B', 'P', 'BM'], [
        Reaction('R_S_up', {'S': 1}, 0, 10),
        Reaction('R_SA', {'S': -1, 'A': 1}, 0, 1000),
        Reaction('R_SB', {'S': -1, 'B': 1}, 0, 1000),
        Reaction('R_AB', {'A': -1, 'B': 1}, -1000, 1000),
        Reaction('R_AP', {'A': -1, 'P': 1}, 0, 1000),
        Reaction('R_BM', {'B': -2, 'BM': 1}, 0, 1000),
        Reaction('R_P_ex', {'P': -1}, 0, 1000),
        Reaction('R_BM_ex', {'BM': -1}, 0, 1000, objective_coefficient=1),
    ])


def chain_model(length):
    """Linear pathway with a reversible bypass around every step."""
    species = ['M' + str(i) for i in range(length + 1)]
    reactions = [Reaction('EX_in', {'M0': 1}, 0, 10)]
    for i in range(length):
        reactions += [Reaction('R' + str(i), {species[i]: -1, species[i + 1]: 1}, 0, 8)]
        reactions += [Reaction('B' + str(i), {species[i]: -1, species[i + 1]: 1}, -2, 5)]
    reactions += [Reaction('EX_out', {species[-1]: -1}, 0, 1000, objective_coefficient=1)]
    return MetabolicModel('chain', species, reactions)


@pytest.fixture
def model_chain():
    return chain_model(12)


@pytest.fixture
def model_toy_cobra():
    """The toy network as a cobra model."""
    from cobra import Model, Metabolite
    from cobra import Reaction as CobraReaction
    model = Model('toy_cobra')
    s1 = Metabolite('S1')
    s2 = Metabolite('S2')
    r1 = CobraReaction('R1', lower_bound=0, upper_bound=10)
    r1.add_metabolites({s1: -1, s2: 1})
    r2 = CobraReaction('R2', lower_bound=0, upper_bound=10)
    r2.add_metabolites({s1: 1})
    r3 = CobraReaction('R3', lower_bound=0, upper_bound=10)
    r3.add_metabolites({s2: -1})
    model.add_reactions([r1, r2, r3])
    model.objective = 'R3'
    return model


@pytest.fixture
def model_textbook():
    """E. coli core model shipped with cobra."""
    from pathlib import Path
    import cobra
    from cobra.io import read_sbml_model
    model_path = Path(cobra.__path__[0]) / "data" / "textbook.xml.gz"
    return read_sbml_model(str(model_path.resolve()))
