from archscan.finder import RelationshipResolver
from archscan.models.enums import TypeKind
from archscan.repository import InMemoryTypeRepository


def add_components(container, *type_names):
    return [container.add_component(name=t.rpartition('.')[2], type=t) for t in type_names]


def test_cycle_yields_one_edge_each_way(container):
    repository = InMemoryTypeRepository()
    repository.define('app.A', references=['app.B'])
    repository.define('app.B', references=['app.A'])
    a, b = add_components(container, 'app.A', 'app.B')

    added = RelationshipResolver(container, repository).resolve()

    assert len(added) == 2
    assert [r.destination for r in a.relationships] == ['app.B']
    assert [r.destination for r in b.relationships] == ['app.A']


def test_reference_declared_on_superclass_is_inherited(container):
    repository = InMemoryTypeRepository()
    repository.define('app.Base', kind=TypeKind.ABSTRACT, references=['app.Logger'])
    repository.define('app.Service', supertypes=['app.Base'])
    repository.define('app.Logger')
    service, logger = add_components(container, 'app.Service', 'app.Logger')

    RelationshipResolver(container, repository).resolve()

    assert service.uses(logger)
    assert logger.relationships == []


def test_supertype_owned_by_another_component_still_passes_on_its_references(container):
    repository = InMemoryTypeRepository()
    repository.define('app.Logger')
    repository.define('app.BaseComponent', references=['app.Logger'])
    repository.define('app.Service', supertypes=['app.BaseComponent'])
    service, base, logger = add_components(container, 'app.Service', 'app.BaseComponent', 'app.Logger')

    RelationshipResolver(container, repository).resolve()

    assert [r.destination for r in service.relationships] == ['app.BaseComponent', 'app.Logger']
    assert base.uses(logger)


def test_shared_interface_creates_no_edges(container):
    repository = InMemoryTypeRepository()
    repository.define('app.Feature', kind=TypeKind.INTERFACE)
    repository.define('app.One', supertypes=['app.Feature'])
    repository.define('app.Two', supertypes=['app.Feature'])
    add_components(container, 'app.One', 'app.Two')

    assert RelationshipResolver(container, repository).resolve() == []
    assert container.relationships == []


def test_supporting_type_references_count_for_the_component(container):
    repository = InMemoryTypeRepository()
    repository.define('app.Api', kind=TypeKind.INTERFACE)
    repository.define('app.ApiImpl', supertypes=['app.Api'], references=['app.Store'])
    repository.define('app.Store')
    api, store = add_components(container, 'app.Api', 'app.Store')
    container.add_code_element(api, 'app.ApiImpl')

    RelationshipResolver(container, repository).resolve()

    assert api.uses(store)
    # ApiImpl belongs to api itself, so no self-edge
    assert len(api.relationships) == 1


def test_unresolvable_types_are_skipped(container):
    repository = InMemoryTypeRepository()
    repository.define('app.A', supertypes=['vendor.Missing'], references=['vendor.Other', 'app.B'])
    repository.define('app.B')
    a, b = add_components(container, 'app.A', 'app.B')
    container.add_component(name='Ghost', type='app.Ghost')

    RelationshipResolver(container, repository).resolve()

    assert [r.destination for r in a.relationships] == ['app.B']
    assert container.get_component_with_name('Ghost').relationships == []


def test_resolve_twice_adds_nothing_new(container):
    repository = InMemoryTypeRepository()
    repository.define('app.A', references=['app.B'])
    repository.define('app.B')
    add_components(container, 'app.A', 'app.B')
    resolver = RelationshipResolver(container, repository, description='Uses')

    assert len(resolver.resolve()) == 1
    assert resolver.resolve() == []
    assert container.relationships[0].description == 'Uses'


def test_efferent_types_follow_supertypes_transitively(container):
    repository = InMemoryTypeRepository()
    repository.define('app.Root', references=['app.X'])
    repository.define('app.Middle', supertypes=['app.Root'], references=['app.Y'])
    repository.define('app.Leaf', supertypes=['app.Middle'])
    add_components(container, 'app.Leaf')

    efferent = RelationshipResolver(container, repository).efferent_types('app.Leaf')

    assert efferent == ['app.Middle', 'app.Y', 'app.Root', 'app.X']
