"""TV mode scenes: named filter/sort configurations shown in rotation."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..db.models import Client
from ..utils.normalization import KNOWN_COLLABORATORS

CUTS = ('prioridade', 'destaque', 'responsaveis', 'comentarios', 'checklist')
SORTS = ('ordem', 'prioridade', 'nome', 'demandas')
DENSITIES = ('compacta', 'normal', 'gigante')
CLIENT_TYPES = ('TODOS', 'AC', 'AV')


@dataclass(frozen=True)
class SceneFilters:
    tipo_cliente: str = 'TODOS'
    responsavel: Optional[str] = None
    recorte: Optional[str] = None
    ordenar_por: Optional[str] = None
    densidade: str = 'normal'

    def __post_init__(self):
        if self.tipo_cliente not in CLIENT_TYPES:
            raise ValueError(f"tipo_cliente must be one of: {', '.join(CLIENT_TYPES)}")
        if self.recorte is not None and self.recorte not in CUTS:
            raise ValueError(f"recorte must be one of: {', '.join(CUTS)}")
        if self.ordenar_por is not None and self.ordenar_por not in SORTS:
            raise ValueError(f"ordenar_por must be one of: {', '.join(SORTS)}")
        if self.densidade not in DENSITIES:
            raise ValueError(f"densidade must be one of: {', '.join(DENSITIES)}")


@dataclass(frozen=True)
class Scene:
    id: str
    titulo: str
    duracao_segundos: int
    filtros: SceneFilters = field(default_factory=SceneFilters)


@dataclass
class TVClient:
    """What a TV card needs to know about a client."""
    id: str
    name: str
    client_type: str = 'AC'
    display_order: int = 999
    is_priority: bool = False
    is_highlighted: bool = False
    is_checked: bool = False
    comment_count: int = 0
    collaborators: List[str] = field(default_factory=list)
    total_demands: int = 0

    @classmethod
    def from_client(cls, client: Client) -> 'TVClient':
        return cls(
            id=client.id,
            name=client.name,
            client_type=client.client_type,
            display_order=client.display_order,
            is_priority=bool(client.is_priority),
            is_highlighted=bool(client.is_highlighted),
            is_checked=bool(client.is_checked),
            comment_count=client.comment_count or 0,
            collaborators=list(client.collaborators or []),
            total_demands=client.total_demands
        )


def _general(scene_id: str, titulo: str, recorte: str, ordenar_por: Optional[str] = None) -> Scene:
    return Scene(scene_id, titulo, 120, SceneFilters(recorte=recorte, ordenar_por=ordenar_por))


def _collaborator(name: str) -> Scene:
    return Scene(
        f"{name}-todos",
        f"{name.capitalize()} (Todos)",
        150,
        SceneFilters(responsavel=name, ordenar_por='prioridade')
    )


DEFAULT_SCENES = [
    _general('prioridade-geral', 'Prioridade (Geral)', 'prioridade', 'prioridade'),
    _general('destaque-geral', 'Destaque (Geral)', 'destaque'),
    _general('responsaveis-geral', 'Responsáveis (Geral)', 'responsaveis'),
    _general('comentarios-geral', 'Comentários (Geral)', 'comentarios'),
] + [_collaborator(name) for name in KNOWN_COLLABORATORS]


def apply_scene(clients: Iterable[TVClient], scene: Scene) -> List[TVClient]:
    """Filter and sort clients the way a scene shows them."""
    filtros = scene.filtros
    result = list(clients)

    if filtros.tipo_cliente != 'TODOS':
        result = [c for c in result if c.client_type == filtros.tipo_cliente]

    if filtros.responsavel:
        result = [c for c in result if filtros.responsavel in c.collaborators]

    if filtros.recorte == 'prioridade':
        result = [c for c in result if c.is_priority]
    elif filtros.recorte == 'destaque':
        result = [c for c in result if c.is_highlighted]
    elif filtros.recorte == 'responsaveis':
        result = [c for c in result if any(name in c.collaborators for name in KNOWN_COLLABORATORS)]
    elif filtros.recorte == 'comentarios':
        result = [c for c in result if c.comment_count > 0]
    elif filtros.recorte == 'checklist':
        result = [c for c in result if c.is_checked]

    if filtros.ordenar_por == 'prioridade':
        result.sort(key=lambda c: (not c.is_priority, c.display_order))
    elif filtros.ordenar_por == 'nome':
        result.sort(key=lambda c: c.name.casefold())
    elif filtros.ordenar_por == 'demandas':
        result.sort(key=lambda c: c.total_demands, reverse=True)
    else:
        result.sort(key=lambda c: c.display_order)
    return result


def grid_columns(count: int, densidade: str = 'normal') -> int:
    """Number of card columns for a client count at a density."""
    if densidade == 'gigante':
        if count <= 4:
            return 2
        return 3 if count <= 9 else 4

    if densidade == 'compacta':
        for limit, columns in ((16, 4), (36, 6), (64, 8)):
            if count <= limit:
                return columns
        return 10

    for limit, columns in ((6, 3), (12, 4), (20, 5), (30, 6), (42, 7)):
        if count <= limit:
            return columns
    return 8
