"""
Schema IR parser.

Reads the dictionary form of the IR into SchemaIR nodes. Two layouts are
accepted: a flat one (models, enums, inputTypes, outputTypes,
modelOperations) and the DMMF document layout (datamodel / schema /
mappings).
"""

from __future__ import annotations

from typing import Any

from .nodes import (
    RawEnum,
    RawField,
    RawInputField,
    RawInputType,
    RawModel,
    RawModelOperations,
    RawOutputField,
    RawOutputType,
    RawTypeRef,
    SchemaIR,
)


class SchemaIRParser:
    """Parses the dictionary form of the schema IR."""

    def parse(self, d: dict[str, Any]) -> SchemaIR:
        if "datamodel" in d:
            return self._parse_dmmf(d)
        return SchemaIR(
            models=[self._parse_model(m) for m in d.get("models", [])],
            enums=[self._parse_enum(e) for e in d.get("enums", [])],
            input_types=[self._parse_input_type(t) for t in d.get("inputTypes", [])],
            output_types=[self._parse_output_type(t) for t in d.get("outputTypes", [])],
            model_operations=[self._parse_model_operations(m) for m in d.get("modelOperations", [])],
            raw=d,
        )

    def _parse_dmmf(self, d: dict[str, Any]) -> SchemaIR:
        datamodel = d.get("datamodel", {})
        schema = d.get("schema", {})
        mappings = d.get("mappings", {})

        enums = [self._parse_enum(e) for e in datamodel.get("enums", [])]
        known_enums = {e.name for e in enums}
        for namespace in ("prisma", "model"):
            for e in schema.get("enumTypes", {}).get(namespace, []) or []:
                if e["name"] not in known_enums:
                    enums.append(self._parse_enum(e))
                    known_enums.add(e["name"])

        input_types = []
        for namespace in ("prisma", "model"):
            for t in schema.get("inputObjectTypes", {}).get(namespace, []) or []:
                input_types.append(self._parse_input_type(t))

        output_types = []
        for namespace in ("prisma", "model"):
            for t in schema.get("outputObjectTypes", {}).get(namespace, []) or []:
                output_types.append(self._parse_output_type(t))

        return SchemaIR(
            models=[self._parse_model(m) for m in datamodel.get("models", [])],
            enums=enums,
            input_types=input_types,
            output_types=output_types,
            model_operations=[self._parse_model_operations(m) for m in mappings.get("modelOperations", [])],
            raw=d,
        )

    def _parse_model(self, m: dict[str, Any]) -> RawModel:
        primary_key = m.get("primaryKey") or {}
        return RawModel(
            name=m["name"],
            fields=[self._parse_field(f) for f in m.get("fields", [])],
            primary_key=list(primary_key.get("fields", [])),
            primary_key_name=primary_key.get("name"),
            unique_fields=[list(u) for u in m.get("uniqueFields", [])],
            documentation=m.get("documentation"),
        )

    def _parse_field(self, f: dict[str, Any]) -> RawField:
        return RawField(
            name=f["name"],
            kind=f.get("kind", "scalar"),
            type=f["type"],
            is_list=f.get("isList", False),
            is_required=f.get("isRequired", False),
            is_id=f.get("isId", False),
            relation_name=f.get("relationName"),
            relation_from_fields=list(f.get("relationFromFields") or []),
            relation_to_fields=list(f.get("relationToFields") or []),
            documentation=f.get("documentation"),
            exposed_name=f.get("exposedName"),
        )

    def _parse_enum(self, e: dict[str, Any]) -> RawEnum:
        values = [v["name"] if isinstance(v, dict) else v for v in e.get("values", [])]
        return RawEnum(name=e["name"], values=values, documentation=e.get("documentation"))

    def _parse_type_ref(self, t: dict[str, Any]) -> RawTypeRef:
        return RawTypeRef(
            type=t["type"],
            location=t.get("location", "scalar"),
            is_list=t.get("isList", False),
        )

    def _parse_input_field(self, f: dict[str, Any]) -> RawInputField:
        return RawInputField(
            name=f["name"],
            is_required=f.get("isRequired", False),
            is_nullable=f.get("isNullable", False),
            input_types=[self._parse_type_ref(t) for t in f.get("inputTypes", [])],
            documentation=f.get("documentation"),
        )

    def _parse_input_type(self, t: dict[str, Any]) -> RawInputType:
        return RawInputType(
            name=t["name"],
            fields=[self._parse_input_field(f) for f in t.get("fields", [])],
            documentation=t.get("documentation"),
        )

    def _parse_output_type(self, t: dict[str, Any]) -> RawOutputType:
        fields = []
        for f in t.get("fields", []):
            is_nullable = f.get("isNullable", False)
            fields.append(
                RawOutputField(
                    name=f["name"],
                    is_nullable=is_nullable,
                    is_required=f.get("isRequired", not is_nullable),
                    output_type=self._parse_type_ref(f["outputType"]),
                    args=[self._parse_input_field(a) for a in f.get("args", [])],
                    documentation=f.get("documentation"),
                )
            )
        return RawOutputType(name=t["name"], fields=fields, documentation=t.get("documentation"))

    def _parse_model_operations(self, m: dict[str, Any]) -> RawModelOperations:
        model = m.get("model")
        actions = m.get("actions")
        if actions is None:
            # DMMF layout: {"model": "User", "findMany": "findManyUser", ...}
            actions = {k: v for k, v in m.items() if k != "model" and isinstance(v, str)}
        return RawModelOperations(model=model, actions=dict(actions))
