"""
MongoDB adapter for QuerySpec.

Keeps the MongoDB operator syntax out of the filter translator:
QuerySpec in, pymongo filter / projection / sort / skip / limit out.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING

from internhub.services.query_filter import Direction, Operator, QuerySpec

MONGO_OPERATORS = {
    Operator.ne: "$ne",
    Operator.gt: "$gt",
    Operator.gte: "$gte",
    Operator.lt: "$lt",
    Operator.lte: "$lte",
    Operator.in_: "$in",
}


@dataclass(frozen=True)
class MongoQuery:
    filter: Dict[str, Any]
    projection: Optional[Dict[str, int]]
    sort: List[Tuple[str, int]]
    skip: int
    limit: int

    def pipeline_stages(self) -> List[dict]:
        """Aggregation stages equivalent to find(filter).sort().skip().limit()."""
        stages = [{"$match": self.filter}]
        if self.sort:
            stages.append({"$sort": dict(self.sort)})
        stages.append({"$skip": self.skip})
        stages.append({"$limit": self.limit})
        if self.projection:
            stages.append({"$project": self.projection})
        return stages


def to_mongo(spec: QuerySpec) -> MongoQuery:
    return MongoQuery(
        filter=build_filter(spec),
        projection={name: 1 for name in spec.select} or None,
        sort=[
            (key.field, DESCENDING if key.direction is Direction.desc else ASCENDING)
            for key in spec.sort
        ],
        skip=spec.skip,
        limit=spec.limit,
    )


def build_filter(spec: QuerySpec) -> Dict[str, Any]:
    """
    Build the filter document.

    Conditions on the same field merge:
        minSalary>=50, minSalary<=90 -> {"minSalary": {"$gte": 50, "$lte": 90}}
    """
    operators: Dict[str, Dict[str, Any]] = {}
    for condition in spec.conditions:
        key = "$eq" if condition.operator is Operator.eq else MONGO_OPERATORS[condition.operator]
        operators.setdefault(condition.field, {})[key] = condition.value

    result = {}
    for name, ops in operators.items():
        if list(ops) == ["$eq"]:
            result[name] = ops["$eq"]
        else:
            result[name] = ops
    return result
