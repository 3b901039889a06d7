import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection
import pytest

from terrainedit.edit.brush import Brush, Operation
from terrainedit.geometry.primitives import Vertex


@pytest.fixture
def shown(monkeypatch):
    calls = []
    monkeypatch.setattr(plt, "show", lambda *args, **kwargs: calls.append(args))
    yield calls
    plt.close("all")


def test_plot_adds_the_surface_to_a_3d_axis(world, shown):
    world.apply(Brush.sphere(Operation.SUB, Vertex(0.0, 0.0, 0.0), 1.0))
    world.mesh.plot()

    assert len(shown) == 1
    ax = plt.gcf().axes[0]
    surfaces = [c for c in ax.collections if isinstance(c, Poly3DCollection)]
    assert len(surfaces) == 1
    assert ax.get_title().startswith("Terrain plotted at")
