from _pytest.unittest import UnitTestCase
from testscenarios import WithScenarios


def pytest_pycollect_makeitem(collector, name, obj):
    """Expand testscenarios ``scenarios`` into one test class per scenario.

    pytest's unittest support does not go through ``WithScenarios.run``,
    so the scenario attributes would otherwise never be applied.
    """
    if not (isinstance(obj, type) and issubclass(obj, WithScenarios)):
        return None
    scenarios = getattr(obj, 'scenarios', None)
    if not scenarios:
        return None
    items = []
    for scenario_name, params in scenarios:
        attrs = dict(params)
        attrs['scenarios'] = None
        attrs['__module__'] = obj.__module__
        cls_name = '{0}_{1}'.format(name, scenario_name)
        sub = type(cls_name, (obj,), attrs)
        setattr(collector.obj, cls_name, sub)
        items.append(UnitTestCase.from_parent(collector, name=cls_name,
                                              obj=sub))
    return items
