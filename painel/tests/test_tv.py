"""Tests for TV scenes and the scene rotation."""
import pytest

from ..cli.config import Config
from ..commands.tv import TVCommand
from ..db.models import Client
from ..db.session import SessionManager
from ..tv.rotation import SceneRotation
from ..tv.scenes import (
    DEFAULT_SCENES,
    Scene,
    SceneFilters,
    TVClient,
    apply_scene,
    grid_columns
)

CLIENTS = [
    TVClient(id='1', name='Seara', client_type='AC', display_order=3, is_priority=True,
             collaborators=['celine'], total_demands=5),
    TVClient(id='2', name='Agua Clara', client_type='AV', display_order=1, is_highlighted=True,
             comment_count=2, total_demands=9),
    TVClient(id='3', name='Cocatrel', client_type='AC', display_order=2, is_priority=True,
             is_checked=True, collaborators=['gabi', 'celine'], total_demands=1),
    TVClient(id='4', name='Bela Vista', client_type='AV', display_order=4)
]

def scene(**filters):
    return Scene('test', 'Test', 10, SceneFilters(**filters))

def ids(clients):
    return [c.id for c in clients]

def test_default_scenes():
    assert len(DEFAULT_SCENES) == 8
    assert DEFAULT_SCENES[0].duracao_segundos == 120
    assert DEFAULT_SCENES[-1].filtros.responsavel == 'vanessa'
    assert DEFAULT_SCENES[-1].duracao_segundos == 150

def test_apply_scene_filters():
    assert ids(apply_scene(CLIENTS, scene())) == ['2', '3', '1', '4']
    assert ids(apply_scene(CLIENTS, scene(tipo_cliente='AV'))) == ['2', '4']
    assert ids(apply_scene(CLIENTS, scene(responsavel='celine'))) == ['3', '1']
    assert ids(apply_scene(CLIENTS, scene(recorte='prioridade'))) == ['3', '1']
    assert ids(apply_scene(CLIENTS, scene(recorte='destaque'))) == ['2']
    assert ids(apply_scene(CLIENTS, scene(recorte='responsaveis'))) == ['3', '1']
    assert ids(apply_scene(CLIENTS, scene(recorte='comentarios'))) == ['2']
    assert ids(apply_scene(CLIENTS, scene(recorte='checklist'))) == ['3']

def test_apply_scene_sorting():
    assert ids(apply_scene(CLIENTS, scene(ordenar_por='prioridade'))) == ['3', '1', '2', '4']
    assert ids(apply_scene(CLIENTS, scene(ordenar_por='nome'))) == ['2', '4', '3', '1']
    assert ids(apply_scene(CLIENTS, scene(ordenar_por='demandas'))) == ['2', '1', '3', '4']

def test_invalid_filters():
    with pytest.raises(ValueError):
        SceneFilters(tipo_cliente='XX')
    with pytest.raises(ValueError):
        SceneFilters(recorte='todos')
    with pytest.raises(ValueError):
        SceneFilters(densidade='enorme')

def test_grid_columns():
    assert grid_columns(4, 'gigante') == 2
    assert grid_columns(9, 'gigante') == 3
    assert grid_columns(10, 'gigante') == 4
    assert grid_columns(16, 'compacta') == 4
    assert grid_columns(65, 'compacta') == 10
    assert grid_columns(0) == 3
    assert grid_columns(12) == 4
    assert grid_columns(42) == 7
    assert grid_columns(43) == 8

def test_rotation_advances_when_countdown_ends():
    scenes = [Scene('a', 'A', 3), Scene('b', 'B', 2)]
    changes = []
    rotation = SceneRotation(scenes, on_change=changes.append)

    assert not rotation.tick()
    assert not rotation.tick()
    assert rotation.remaining_seconds == 1
    assert rotation.tick()
    assert rotation.current.id == 'b'
    assert rotation.remaining_seconds == 2

    assert rotation.tick(2)
    assert rotation.current.id == 'a'
    assert [s.id for s in changes] == ['b', 'a']

def test_rotation_pause_and_manual_navigation():
    scenes = [Scene('a', 'A', 3), Scene('b', 'B', 5), Scene('c', 'C', 7)]
    rotation = SceneRotation(scenes)

    rotation.pause()
    assert not rotation.tick(10)
    assert rotation.current.id == 'a'
    assert rotation.remaining_seconds == 3

    rotation.tick()
    assert rotation.previous_scene().id == 'c'
    assert rotation.remaining_seconds == 7
    assert rotation.next_scene().id == 'a'
    assert rotation.go_to(1).id == 'b'
    assert rotation.go_to(99).id == 'b'

    rotation.toggle()
    assert rotation.playing

def test_rotation_set_scenes():
    rotation = SceneRotation([Scene('a', 'A', 3), Scene('b', 'B', 5)])
    rotation.go_to(1)
    rotation.set_scenes([Scene('x', 'X', 4)])
    assert rotation.current.id == 'x'
    assert rotation.remaining_seconds == 4
    with pytest.raises(ValueError):
        rotation.set_scenes([])

def test_tv_redraws_when_clients_change_elsewhere(database_url, capsys):
    command = TVCommand(Config(database_url=database_url))
    command.watch()
    command.load_clients()
    rotation = SceneRotation([scene()])
    assert command.clients == []
    assert not command.refresh(rotation)

    other = SessionManager(database_url)
    with other as session:
        session.add(Client.create('Nova Empresa'))

    assert command.refresh(rotation)
    assert [c.name for c in command.clients] == ['Nova Empresa']
    assert 'Nova Empresa' in capsys.readouterr().out
    assert not command.refresh(rotation)

    command.stop_watching()
    command.session_manager.engine.dispose()
    other.engine.dispose()
