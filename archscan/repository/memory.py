"""In-memory type repository built from explicit type declarations."""

from typing import Dict, Iterable, Optional, Union

from archscan.models.enums import ReferenceKind, TypeKind
from archscan.models.type_info import MarkerInfo, TypeInfo, TypeReference
from archscan.repository.base import SymbolTableTypeRepository


class InMemoryTypeRepository(SymbolTableTypeRepository):
    """Symbol table populated directly by the caller."""

    def define(
        self,
        name: str,
        kind: TypeKind = TypeKind.CLASS,
        supertypes: Iterable[str] = (),
        references: Iterable[Union[str, TypeReference]] = (),
        markers: Iterable[Union[str, MarkerInfo]] = (),
        marker_arguments: Optional[Dict[str, Dict[str, str]]] = None,
        package: Optional[str] = None,
    ) -> TypeInfo:
        """Declare a type.

        Args:
            name: Fully-qualified type name.
            kind: Whether the type is a concrete class, abstract class or interface.
            supertypes: Fully-qualified names of the direct supertypes.
            references: Types named by declared members; plain strings are
                recorded as attribute references.
            markers: Marker names (or MarkerInfo records) carried by the type.
            marker_arguments: Literal arguments keyed by marker name.
            package: Package of the type; defaults to the name without its last segment.

        Returns:
            The recorded TypeInfo.
        """
        marker_arguments = marker_arguments or {}
        return self.add_type(
            TypeInfo(
                name=name,
                kind=kind,
                package=package,
                supertypes=list(supertypes),
                references=[
                    r if isinstance(r, TypeReference) else TypeReference(type=r, kind=ReferenceKind.ATTRIBUTE)
                    for r in references
                ],
                markers=[
                    m if isinstance(m, MarkerInfo) else MarkerInfo(name=m, arguments=marker_arguments.get(m, {}))
                    for m in markers
                ],
            )
        )
