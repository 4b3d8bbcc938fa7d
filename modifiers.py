from dataclasses import dataclass


@dataclass
class SpatialModifiers:
    """Tweakable rule parameters.

    Central store for the thresholds and costs used by the exploration and
    territory systems.  Services take an instance so a host (or a test) can
    run with its own values; :data:`MODIFIERS` holds the defaults.
    """

    # Competence thresholds
    claim_min_influence: int = 1
    explore_min_level: int = 1

    # Action point costs
    exploration_action_cost: int = 5

    # Colonies
    starting_colony_population: int = 100
    min_colony_spacing: int = 0  # hex distance between colony centers, 0 = no rule
    require_contiguous_expansion: bool = False

    def __post_init__(self) -> None:
        if self.exploration_action_cost < 0:
            raise ValueError("exploration_action_cost must be >= 0")
        if self.min_colony_spacing < 0:
            raise ValueError("min_colony_spacing must be >= 0")
        if self.starting_colony_population < 0:
            raise ValueError("starting_colony_population must be >= 0")


# Default modifiers used when a service is built without its own
MODIFIERS = SpatialModifiers()
