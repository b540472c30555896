import pytest

from moon_explorer.elevation import ElevationModel, build_catalog_field


@pytest.fixture(scope="session")
def catalog_field():
    """Default 72x144 field built from the mare/crater catalog."""
    return build_catalog_field()


@pytest.fixture
def quiet_model():
    """Elevation model with the noise texture switched off."""
    return ElevationModel(noise_km=0.0)
