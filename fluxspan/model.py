#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
#
#
"""Model descriptor classes (Species, Reaction, MetabolicModel)"""

from cobra import Configuration
from typing import Dict, List
from types import MappingProxyType


class Species(object):
    """A species (metabolite) of a metabolic network
    
    Species carry no numeric state. They are only referenced by the stoichiometry
    of reactions.
    
    Example:
        s = Species('glc_c')
    
    Args:
        id (str):
            The species identifier.
    """

    __slots__ = ('_id',)

    def __init__(self, id):
        object.__setattr__(self, '_id', str(id))

    def __setattr__(self, name, value):
        raise AttributeError("Species objects are immutable.")

    def __reduce__(self):
        return (Species, (self._id,))

    @property
    def id(self) -> str:
        return self._id

    def __eq__(self, other):
        return isinstance(other, Species) and other.id == self.id

    def __hash__(self):
        return hash(self._id)

    def __repr__(self):
        return "Species('" + self._id + "')"


class Reaction(object):
    """A reaction of a metabolic network
    
    A reaction is a column of the stoichiometric matrix. It carries its
    stoichiometry, its flux bounds and its objective coefficient. Reactions
    are immutable once constructed.
    
    Example:
        r = Reaction('PGI', {'g6p_c': -1, 'f6p_c': 1}, -1000, 1000)
    
    Args:
        id (str):
            The reaction identifier.
            
        stoichiometry (dict):
            Species identifiers mapped to signed stoichiometric coefficients. Negative
            coefficients are consumed, positive coefficients are produced.
            
        lower_bound (optional (float)): (Default: cobra Configuration().lower_bound)
            The lower flux bound. May be -inf.
            
        upper_bound (optional (float)): (Default: cobra Configuration().upper_bound)
            The upper flux bound. May be inf.
            
        objective_coefficient (optional (float)): (Default: 0.0)
            Weight of this reaction in the (maximized) model objective.
    """

    __slots__ = ('_id', '_stoichiometry', '_lower_bound', '_upper_bound', '_objective_coefficient')

    def __init__(self, id, stoichiometry=None, lower_bound=None, upper_bound=None, objective_coefficient=0.0):
        cobra_conf = Configuration()
        if lower_bound is None:
            lower_bound = cobra_conf.lower_bound
        if upper_bound is None:
            upper_bound = cobra_conf.upper_bound
        if stoichiometry is None:
            stoichiometry = {}
        object.__setattr__(self, '_id', str(id))
        object.__setattr__(self, '_stoichiometry', {str(k): float(v) for k, v in stoichiometry.items()})
        object.__setattr__(self, '_lower_bound', float(lower_bound))
        object.__setattr__(self, '_upper_bound', float(upper_bound))
        object.__setattr__(self, '_objective_coefficient', float(objective_coefficient))

    def __setattr__(self, name, value):
        raise AttributeError("Reaction objects are immutable.")

    def __reduce__(self):
        return (Reaction, (self._id, self._stoichiometry, self._lower_bound, self._upper_bound, self._objective_coefficient))

    @property
    def id(self) -> str:
        return self._id

    @property
    def stoichiometry(self) -> Dict[str, float]:
        return MappingProxyType(self._stoichiometry)

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @property
    def upper_bound(self) -> float:
        return self._upper_bound

    @property
    def bounds(self):
        return self._lower_bound, self._upper_bound

    @property
    def objective_coefficient(self) -> float:
        return self._objective_coefficient

    def __repr__(self):
        return "Reaction('" + self._id + "', " + str(dict(self._stoichiometry)) + ", " + \
               str(self._lower_bound) + ", " + str(self._upper_bound) + ", " + str(self._objective_coefficient) + ")"


class MetabolicModel(object):
    """A parsed metabolic network
    
    The model descriptor handed to build(). It lists the species and reactions of a
    network in a fixed order, which determines the row and column order of the
    resulting LP problem. The descriptor does not check cross references; this is
    done when the LP problem is built.
    
    Example:
        model = MetabolicModel('toy', ['S1', 'S2'], [Reaction('R1', {'S1': -1, 'S2': 1}, 0, 10)])
    
    Args:
        id (str):
            The model identifier.
            
        species (list of Species or str):
            The species of the network.
            
        reactions (list of Reaction):
            The reactions of the network.
    """

    def __init__(self, id='', species=(), reactions=()):
        self.id = id
        self.species = tuple(s if isinstance(s, Species) else Species(s) for s in species)
        self.reactions = tuple(reactions)

    @classmethod
    def from_cobra(cls, model) -> 'MetabolicModel':
        """Create a model descriptor from a cobra.Model
        
        Example:
            model = MetabolicModel.from_cobra(read_sbml_model('e_coli_core.xml'))
        
        Args:
            model (cobra.Model):
                A metabolic model that is an instance of the cobra.Model class.
        
        Descriptors are always maximized. If the cobra model minimizes its objective,
        the objective coefficients are negated, so that the optimal objective value of
        the descriptor is the negative of the cobra optimum.

        Returns:
            (MetabolicModel):
                A descriptor with the same species, reactions, bounds and objective
                coefficients.
        """
        sense = -1.0 if getattr(model, 'objective_direction', 'max') == 'min' else 1.0
        species = [Species(m.id) for m in model.metabolites]
        reactions = [
            Reaction(r.id, {m.id: v for m, v in r.metabolites.items()}, r.lower_bound, r.upper_bound,
                     sense * r.objective_coefficient) for r in model.reactions
        ]
        return cls(model.id, species, reactions)

    @property
    def species_ids(self) -> List[str]:
        return [s.id for s in self.species]

    @property
    def reaction_ids(self) -> List[str]:
        return [r.id for r in self.reactions]

    def __repr__(self):
        return "<MetabolicModel " + str(self.id) + " with " + str(len(self.species)) + " species and " + \
               str(len(self.reactions)) + " reactions>"
