from enum import Enum


class Conference(str, Enum):
    EAST = "east"
    WEST = "west"


class ScoringMode(str, Enum):
    WEIGHTED = "weighted"  # wins x rank-derived weight
    DISTANCE = "distance"  # proximity of predicted rank to actual finish
