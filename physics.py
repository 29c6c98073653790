import logging
from collections import namedtuple

import numpy as np

"""
PHYSICS MODULE
--------------
This module is the simulation side of the Orrery: it knows where the bodies are at a given epoch
and what calendar date an epoch falls on. The renderer never reaches in here except through the
engine interface (create / advance / snapshot) and the date conversion.

Key Concepts:
1.  **Julian Date (epoch)**: A continuous count of days used by astronomers.
    - JD 2440587.5 is 1970-01-01 00:00 UTC (the Unix epoch).
    - JD 2451545.0 is J2000, the reference epoch of the orbital elements below.

2.  **Orbital Elements**: A set of 6 numbers that uniquely define an orbit.
    - Semi-Major Axis (a): The size of the orbit (AU).
    - Eccentricity (e): The shape of the orbit (0 = circle, 0 < e < 1 = ellipse).
    - Inclination (i): The tilt of the orbit relative to the ecliptic.
    - Longitude of Ascending Node (Omega): The rotation of the orbit around the Z-axis.
    - Longitude of Perihelion (varpi = Omega + omega): Where the closest approach points.
    - Mean Longitude (L): Where the body is at J2000. Mean anomaly M = L - varpi.

3.  **Kepler's Equation**: M = E - e * sin(E), solved numerically for E every frame.

None of this aims to be accurate. The elements are frozen at J2000 and nothing perturbs anything.
"""

logger = logging.getLogger(__name__)

JD_UNIX_EPOCH = 2440587.5
JD_J2000 = 2451545.0
MS_PER_DAY = 86400000
DAYS_PER_YEAR = 365.25

# Epoch the default system starts at (2022-03-04)
START_EPOCH = 2459642.5

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May",
               "Jun", "Jul", "Aug", "Sep", "Oct",
               "Nov", "Dec"]

# J2000 mean elements: a (AU), e, i (deg), L (deg), varpi (deg), Omega (deg)
PLANET_ELEMENTS = {
    "Mercury": (0.38709927, 0.20563593, 7.00497902, 252.25032350, 77.45779628, 48.33076593),
    "Venus": (0.72333566, 0.00677672, 3.39467605, 181.97909950, 131.60246718, 76.67984255),
    "Earth": (1.00000261, 0.01671123, -0.00001531, 100.46457166, 102.93768193, 0.0),
    "Mars": (1.52371034, 0.09339410, 1.84969142, -4.55343205, -23.94362959, 49.55953891),
    "Jupiter": (5.20288700, 0.04838624, 1.30439695, 34.39644051, 14.72847983, 100.47390909),
    "Saturn": (9.53667594, 0.05386179, 2.48599187, 49.95424423, 92.59887831, 113.66242448),
    "Uranus": (19.18916464, 0.04725744, 0.77263783, 313.23810451, 170.95427630, 74.01692503),
    "Neptune": (30.06992276, 0.00859048, 1.77004347, -55.12002969, 44.96476227, 131.78422574),
}

CalendarDate = namedtuple("CalendarDate", ["year", "month", "day"])


class SnapshotError(ValueError):
    """Raised when an engine hands back coords and names that don't line up."""


class PositionSnapshot(namedtuple("PositionSnapshot", ["epoch", "coords", "names"])):
    """
    One frame's worth of body positions.

    coords[i] belongs to names[i]. Only x and y of each coordinate are ever drawn.
    """
    __slots__ = ()

    def validate(self):
        return validate_snapshot(self)


def validate_snapshot(snapshot):
    """Anything with epoch, coords and names passes, as long as coords and names line up."""
    if len(snapshot.coords) != len(snapshot.names):
        raise SnapshotError(
            f"Snapshot has {len(snapshot.coords)} coords but {len(snapshot.names)} names"
        )
    return snapshot


# --- Time Conversion ---

def julian_to_datetime64(epoch):
    """
    Julian date -> numpy datetime64 (UTC, millisecond resolution).

    Sub-millisecond parts are truncated. numpy's range runs far past the year 9999 limit of
    datetime, which a long run at 100 days a frame reaches in a few minutes.
    """
    millis = int((epoch - JD_UNIX_EPOCH) * MS_PER_DAY)
    return np.datetime64(millis, "ms")

def month_name(month_index):
    """0 -> 'Jan' ... 11 -> 'Dec'."""
    return MONTH_NAMES[month_index]

def to_calendar_date(epoch):
    """
    Converts a Julian date into the (year, month, day) shown in the top right of the screen.

    Example:
        to_calendar_date(2440587.5) -> CalendarDate(year=1970, month='Jan', day=1)
    """
    instant = julian_to_datetime64(epoch)
    month_start = instant.astype("datetime64[M]")
    months_since_1970 = int(month_start.astype(np.int64))
    day = int((instant.astype("datetime64[D]") - month_start.astype("datetime64[D]")).astype(np.int64)) + 1
    return CalendarDate(1970 + months_since_1970 // 12, month_name(months_since_1970 % 12), day)


# --- Orbital Mechanics ---

def solve_kepler_equation(mean_anomaly, eccentricity, tolerance=1e-9, max_iterations=50):
    """
    Eccentric anomaly E for Kepler's equation M = E - e * sin(E), elliptical orbits only (e < 1).

    `mean_anomaly` may be a single angle or an array of them (radians); the result has the same shape.
    Newton steps start at M, or at Pi when e >= 0.8 where M is a poor first guess, and stop once
    every correction is below `tolerance`. 1 - e*cos(E) >= 1 - e, so the step never divides by zero.
    """
    M = np.asarray(mean_anomaly, dtype=float)
    E = M.copy() if eccentricity < 0.8 else np.full_like(M, np.pi)

    for _ in range(max_iterations):
        correction = (E - eccentricity * np.sin(E) - M) / (1 - eccentricity * np.cos(E))
        E = E - correction
        if np.all(np.abs(correction) < tolerance):
            break

    return E if E.ndim else float(E)

def mean_motion_deg_per_day(semi_major_axis):
    """Kepler's third law around a solar mass: T (years) = a^1.5."""
    return 360.0 / (DAYS_PER_YEAR * semi_major_axis ** 1.5)

def calculate_position_at_epoch(
    semi_major_axis, eccentricity, inclination_deg,
    mean_longitude_deg, lon_perihelion_deg, lon_asc_node_deg, epoch
):
    """
    Calculates the heliocentric ecliptic position (x, y, z) in AU of a body at a Julian date.

    Steps:
    1. Split the longitude of perihelion into the argument of periapsis (omega = varpi - Omega).
    2. Work out the Mean Anomaly for the epoch from the J2000 value and the mean motion.
    3. Solve Kepler's Equation to get the Eccentric Anomaly (E).
    4. Calculate True Anomaly (nu) and Radius (r), giving the 2D orbital plane position.
    5. Rotate into 3D using (i, Omega, omega).
    """
    i_rad = np.radians(inclination_deg)
    Omega_rad = np.radians(lon_asc_node_deg)
    omega_rad = np.radians(lon_perihelion_deg - lon_asc_node_deg)

    delta_t_days = epoch - JD_J2000
    M_deg = mean_longitude_deg - lon_perihelion_deg + mean_motion_deg_per_day(semi_major_axis) * delta_t_days
    M_rad = np.radians(M_deg) % (2 * np.pi)

    E_rad = solve_kepler_equation(M_rad, eccentricity)

    cos_E = np.cos(E_rad)
    sin_E = np.sin(E_rad)
    sqrt_1_minus_e_sq = np.sqrt(max(0, 1 - eccentricity**2))
    nu_rad = np.arctan2(sqrt_1_minus_e_sq * sin_E, cos_E - eccentricity)

    r_au = semi_major_axis * (1 - eccentricity * cos_E)
    xp = r_au * np.cos(nu_rad)
    yp = r_au * np.sin(nu_rad)

    x = xp * (np.cos(omega_rad) * np.cos(Omega_rad) - np.sin(omega_rad) * np.sin(Omega_rad) * np.cos(i_rad)) \
      - yp * (np.sin(omega_rad) * np.cos(Omega_rad) + np.cos(omega_rad) * np.sin(Omega_rad) * np.cos(i_rad))

    y = xp * (np.cos(omega_rad) * np.sin(Omega_rad) + np.sin(omega_rad) * np.cos(Omega_rad) * np.cos(i_rad)) \
      + yp * (-np.sin(omega_rad) * np.sin(Omega_rad) + np.cos(omega_rad) * np.cos(Omega_rad) * np.cos(i_rad))

    z = xp * (np.sin(omega_rad) * np.sin(i_rad)) \
      + yp * (np.cos(omega_rad) * np.sin(i_rad))

    return np.array([x, y, z])


# --- Simulation Engine ---

class SolSystem:
    """
    The simulation state: an epoch and the bodies being modelled.

    Sol always comes first and sits at the origin.
    """
    def __init__(self, bodies=None, epoch=START_EPOCH):
        if bodies is None:
            bodies = list(PLANET_ELEMENTS)
        unknown = [name for name in bodies if name not in PLANET_ELEMENTS]
        if unknown:
            raise ValueError(f"No orbital elements for: {', '.join(unknown)}")

        self.epoch = epoch
        self.planets = list(bodies)

    @property
    def names(self):
        return ["Sol"] + self.planets

    def tick(self, delta_days):
        self.epoch += delta_days

    def positions(self):
        coords = [(0.0, 0.0)]
        for name in self.planets:
            x, y, _ = calculate_position_at_epoch(*PLANET_ELEMENTS[name], self.epoch)
            coords.append((float(x), float(y)))
        return PositionSnapshot(self.epoch, coords, self.names)


class KeplerEngine:
    """
    Engine adapter the SimulationLoop talks to.

    Any object with create(), advance(handle, step_days) and snapshot(handle) will do;
    width() and height() are optional viewport hints.
    """
    def __init__(self, bodies=None, epoch=START_EPOCH, width=1200, height=800):
        self.bodies = bodies
        self.epoch = epoch
        self._width = width
        self._height = height

    def create(self):
        handle = SolSystem(self.bodies, self.epoch)
        logger.info(f"Created Sol system with {len(handle.names)} bodies at JD {handle.epoch}")
        return handle

    def advance(self, handle, step_days):
        if not step_days > 0:
            raise ValueError(f"Step must be a positive number of days, got {step_days}")
        handle.tick(step_days)

    def snapshot(self, handle):
        return handle.positions()

    def width(self):
        return self._width

    def height(self):
        return self._height
