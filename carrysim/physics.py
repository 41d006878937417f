"""Batted ball flight integration with drag and a simplified Magnus lift."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterator

MPH_TO_MPS = 0.44704
METERS_TO_FEET = 3.28084
MIN_SPEED_MPS = 1e-6
DEFAULT_TIME_STEP = 0.01

# Fixed split of the lift force between the vertical and sideways directions.
LIFT_VERTICAL_SHARE = 0.8
LIFT_SIDEWAYS_SHARE = 0.1

Interval = tuple[float, float]


@dataclass(frozen=True, slots=True)
class PhysicalConstants:
    air_density: float = 1.2  # kg / m^3
    ball_mass: float = 0.145  # kg
    ball_radius: float = 0.0366  # m
    gravity: float = 9.81  # m / s^2

    @property
    def area(self) -> float:
        return math.pi * self.ball_radius * self.ball_radius


CONSTANTS = PhysicalConstants()


@dataclass(frozen=True, slots=True)
class LaunchConditions:
    """Measured launch of a batted ball.

    ``spray_angle_deg`` is positive toward the right-field side (clockwise when
    viewed from above). ``spin_rpm`` only seeds the calibration.
    """

    exit_velocity_mph: float
    launch_angle_deg: float
    spray_angle_deg: float = 0.0
    spin_rpm: float = 0.0


@dataclass(frozen=True, slots=True)
class ParameterBounds:
    cl: Interval = (0.10, 0.25)
    cd: Interval = (0.45, 0.55)
    release_height: Interval = (0.95, 1.10)
    spin_rpm: Interval = (1500.0, 3000.0)

    def __post_init__(self) -> None:
        for name in ("cl", "cd", "release_height", "spin_rpm"):
            low, high = getattr(self, name)
            if low > high:
                msg = f"Lower bound for {name} exceeds upper bound: {low} > {high}"
                raise ValueError(msg)


DEFAULT_BOUNDS = ParameterBounds()


def _clamp(value: float, interval: Interval) -> float:
    low, high = interval
    return min(max(low, value), high)


@dataclass(slots=True)
class AeroParameters:
    """Latent aerodynamic parameters adjusted by the calibrator."""

    cl: float
    cd: float
    release_height: float  # m
    spin_rpm: float

    def clamp(self, bounds: ParameterBounds = DEFAULT_BOUNDS) -> None:
        self.cl = _clamp(self.cl, bounds.cl)
        self.cd = _clamp(self.cd, bounds.cd)
        self.release_height = _clamp(self.release_height, bounds.release_height)
        self.spin_rpm = _clamp(self.spin_rpm, bounds.spin_rpm)

    def contains(self, bounds: ParameterBounds = DEFAULT_BOUNDS) -> bool:
        pairs = (
            (self.cl, bounds.cl),
            (self.cd, bounds.cd),
            (self.release_height, bounds.release_height),
            (self.spin_rpm, bounds.spin_rpm),
        )
        return all(low <= value <= high for value, (low, high) in pairs)

    def as_dict(self) -> dict[str, float]:
        return {
            "cl": self.cl,
            "cd": self.cd,
            "release_height": self.release_height,
            "spin_rpm": self.spin_rpm,
        }


@dataclass(frozen=True, slots=True)
class TrajectoryPoint:
    x: float
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class TrajectoryPath:
    """Flight path from release to first ground contact, sampled every ``time_step``."""

    points: tuple[TrajectoryPoint, ...]
    time_step: float = DEFAULT_TIME_STEP

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TrajectoryPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> TrajectoryPoint:
        return self.points[index]

    @property
    def landing_point(self) -> TrajectoryPoint:
        return self.points[-1]

    @property
    def landing_distance_m(self) -> float:
        last = self.points[-1]
        return math.hypot(last.x, last.y)

    @property
    def landing_distance_ft(self) -> float:
        return self.landing_distance_m * METERS_TO_FEET

    @property
    def apex(self) -> float:
        return max(point.z for point in self.points)

    @property
    def flight_time(self) -> float:
        return (len(self.points) - 1) * self.time_step

    def to_json(self) -> list[dict[str, float]]:
        return [{"x": point.x, "y": point.y, "z": point.z} for point in self.points]


def simulate(
    launch: LaunchConditions,
    aero: AeroParameters,
    time_step: float = DEFAULT_TIME_STEP,
    *,
    constants: PhysicalConstants = CONSTANTS,
) -> TrajectoryPath:
    """Integrate the flight with semi-implicit Euler until the ball reaches the ground.

    Terminates early, leaving a short path, when the speed drops below
    ``MIN_SPEED_MPS``. Heights are clamped to zero when stored, while the loop
    keeps testing the unclamped height.
    """
    speed0 = launch.exit_velocity_mph * MPH_TO_MPS
    launch_rad = math.radians(launch.launch_angle_deg)
    spray_rad = math.radians(-launch.spray_angle_deg)

    vx = speed0 * math.cos(launch_rad) * math.cos(spray_rad)
    vy = speed0 * math.cos(launch_rad) * math.sin(spray_rad)
    vz = speed0 * math.sin(launch_rad)

    x, y, z = 0.0, 0.0, aero.release_height
    points = [TrajectoryPoint(x, y, z)]

    rho = constants.air_density
    area = constants.area
    mass = constants.ball_mass
    gravity = constants.gravity
    dt = time_step

    while z > 0:
        speed = math.sqrt(vx * vx + vy * vy + vz * vz)
        if speed < MIN_SPEED_MPS:
            break

        drag = 0.5 * rho * area * aero.cd * speed * speed
        ax_drag = -(drag / mass) * (vx / speed)
        ay_drag = -(drag / mass) * (vy / speed)
        az_drag = -(drag / mass) * (vz / speed)

        lift = 0.5 * rho * area * aero.cl * speed * speed
        lift_z = (lift / mass) * LIFT_VERTICAL_SHARE
        horizontal_speed = max(MIN_SPEED_MPS, math.hypot(vx, vy))
        lift_x = (lift / mass) * LIFT_SIDEWAYS_SHARE * (-vy / horizontal_speed)
        lift_y = (lift / mass) * LIFT_SIDEWAYS_SHARE * (vx / horizontal_speed)

        ax = ax_drag + lift_x
        ay = ay_drag + lift_y
        az = az_drag + lift_z - gravity

        vx += ax * dt
        vy += ay * dt
        vz += az * dt

        x += vx * dt
        y += vy * dt
        z += vz * dt

        points.append(TrajectoryPoint(x, y, max(z, 0.0)))

    return TrajectoryPath(points=tuple(points), time_step=time_step)
