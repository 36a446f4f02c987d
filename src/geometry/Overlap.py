from dataclasses import dataclass


@dataclass(frozen=True)
class Overlap:
    """A continuous overlap where p(t) == q(a * t + b) for t in [t0, t1].

    qt0/qt1 are the matching parametric values on the second segment.
    """
    a: float
    b: float
    t0: float
    t1: float
    qt0: float
    qt1: float

    @staticmethod
    def create_linear(t0: float, qt0: float, t1: float, qt1: float) -> "Overlap":
        a = (qt1 - qt0) / (t1 - t0)
        b = qt0 - a * t0
        return Overlap(a, b, t0, t1, qt0, qt1)

    def apply(self, t: float) -> float:
        return self.a * t + self.b
