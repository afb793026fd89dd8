from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Affine2D:
    """2D affine transform mapping (x, y) -> (a*x + c*y + e, b*x + d*y + f)."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Affine2D":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "Affine2D":
        return cls(e=float(tx), f=float(ty))

    @classmethod
    def rotation(cls, angle_deg: float) -> "Affine2D":
        rad = math.radians(angle_deg)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        return cls(a=cos_a, b=sin_a, c=-sin_a, d=cos_a)

    @classmethod
    def scaling(cls, sx: float, sy: float) -> "Affine2D":
        return cls(a=float(sx), d=float(sy))

    @classmethod
    def shearing(cls, shx: float, shy: float) -> "Affine2D":
        return cls(b=float(shy), c=float(shx))

    def multiply(self, other: "Affine2D") -> "Affine2D":
        """Return self x other, i.e. `other` is applied first in local coordinates."""

        return Affine2D(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def translate(self, tx: float, ty: float) -> "Affine2D":
        return self.multiply(Affine2D.translation(tx, ty))

    def rotate(self, angle_deg: float) -> "Affine2D":
        return self.multiply(Affine2D.rotation(angle_deg))

    def scale(self, sx: float, sy: float) -> "Affine2D":
        return self.multiply(Affine2D.scaling(sx, sy))

    def determinant(self) -> float:
        return (self.a * self.d) - (self.b * self.c)

    def inverse(self) -> "Affine2D":
        det = self.determinant()
        if abs(det) < 1e-12:
            raise ValueError("affine transform is singular")
        a = self.d / det
        b = -self.b / det
        c = -self.c / det
        d = self.a / det
        return Affine2D(
            a=a,
            b=b,
            c=c,
            d=d,
            e=-(a * self.e + c * self.f),
            f=-(b * self.e + d * self.f),
        )

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        x, y = point
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def apply_vector(self, vector: tuple[float, float]) -> tuple[float, float]:
        vx, vy = vector
        return (self.a * vx + self.c * vy, self.b * vx + self.d * vy)

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    def is_close(self, other: "Affine2D", tol: float = 1e-9) -> bool:
        return all(abs(x - y) <= tol for x, y in zip(self.as_tuple(), other.as_tuple()))


IDENTITY = Affine2D()


def lerp(a: float, b: float, t: float) -> float:
    return (1.0 - t) * a + t * b
