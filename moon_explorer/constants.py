# Scene geometry
MOON_RADIUS = 200.0
MOON_RADIUS_KM = 1737.4
KM_TO_SCENE = MOON_RADIUS / MOON_RADIUS_KM

# Displaced terrain sits at MOON_RADIUS + elevation * TERRAIN_EXAGGERATION.
TERRAIN_EXAGGERATION = 2.0

# Catalog size conversions (size is a diameter in km).
KM_PER_DEG_CRATER = 111.0
KM_PER_RAD_MARE = 57.3

# Elevation grid
GRID_LAT_RESOLUTION = 72
GRID_LON_RESOLUTION = GRID_LAT_RESOLUTION * 2

# Near side (lon = 0) faces +x.
EARTH_POSITION = (1200.0, 80.0, 0.0)

FOCUS_DISTANCE = 300.0

# Initial camera position of the globe view.
CAMERA_HOME = (0.0, 100.0, 500.0)
