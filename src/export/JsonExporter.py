import json
from dataclasses import dataclass
from typing import List

from geometry.Errors import InvalidGeometryError
from geometry.Segment import Segment

# registers the concrete segment types for Segment.deserialize
import geometry.Arc  # noqa: F401
import geometry.EllipticalArc  # noqa: F401
import geometry.Line  # noqa: F401


@dataclass
class JsonExporter:

    @staticmethod
    def dumps(segments: List[Segment]) -> str:
        """JSON text: { "segments": [ {"type": ..., ...}, ... ] }"""
        obj = {"segments": [segment.serialize() for segment in segments]}
        return json.dumps(obj, ensure_ascii=False, indent=4, separators=(",", ":"))

    @staticmethod
    def export(segments: List[Segment], path: str) -> None:
        data = JsonExporter.dumps(segments)
        if path == "-" or path == "stdout":
            print(data)
        else:
            with open(path, "w", encoding="utf-8") as f:
                f.write(data)

    @staticmethod
    def loads(data: str) -> List[Segment]:
        try:
            obj = json.loads(data)
        except json.JSONDecodeError as e:
            raise InvalidGeometryError(f"Not a JSON segment file: {e}") from e
        if not isinstance(obj, dict) or not isinstance(obj.get("segments"), list):
            raise InvalidGeometryError('Expected an object with a "segments" list')
        try:
            return [Segment.deserialize(item) for item in obj["segments"]]
        except KeyError as e:
            raise InvalidGeometryError(f"Serialized segment is missing {e}") from e

    @staticmethod
    def load(path: str) -> List[Segment]:
        with open(path, "r", encoding="utf-8") as f:
            return JsonExporter.loads(f.read())
