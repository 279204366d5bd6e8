"""Oracle catalog queries over the ``SYS.ALL_*`` views."""

from __future__ import annotations

import re
from collections.abc import Sequence

from schematic_core.identifier import ORDINAL, Identifier
from schematic_core.resolution import OracleIdentifierResolutionStrategy

from schematic_introspect.catalog.base import CatalogStatements, StatementCatalog, object_params
from schematic_introspect.catalog.rows import CheckRow, RoutineRow

_USER_OBJECT = "o.ORACLE_MAINTAINED <> 'Y' and o.GENERATED <> 'Y' and o.SECONDARY <> 'Y'"

_KEY_COLUMNS_SQL = """
select
    ac.CONSTRAINT_NAME as constraint_name,
    ac.CONSTRAINT_NAME as constraint_id,
    acc.COLUMN_NAME as column_name,
    acc.POSITION as column_position,
    case when ac.STATUS = 'ENABLED' then 1 else 0 end as is_enabled
from SYS.ALL_CONSTRAINTS ac
inner join SYS.ALL_CONS_COLUMNS acc
    on ac.OWNER = acc.OWNER and ac.CONSTRAINT_NAME = acc.CONSTRAINT_NAME and ac.TABLE_NAME = acc.TABLE_NAME
where ac.OWNER = :schema_name and ac.TABLE_NAME = :object_name and ac.CONSTRAINT_TYPE = '{constraint_type}'
order by ac.CONSTRAINT_NAME, acc.POSITION"""

_COLUMNS_SQL = """
select
    c.COLUMN_NAME as column_name,
    c.DATA_TYPE_OWNER as type_schema,
    c.DATA_TYPE as type_name,
    case when c.CHAR_LENGTH > 0 then c.CHAR_LENGTH end as max_length,
    c.DATA_PRECISION as numeric_precision,
    c.DATA_SCALE as numeric_scale,
    c.CHARACTER_SET_NAME as collation_name,
    case when c.NULLABLE = 'Y' then 1 else 0 end as is_nullable,
    case when c.VIRTUAL_COLUMN = 'NO' then c.DATA_DEFAULT end as default_value,
    case when c.VIRTUAL_COLUMN = 'YES' then 1 else 0 end as is_computed,
    case when c.VIRTUAL_COLUMN = 'YES' then c.DATA_DEFAULT end as computed_definition,
    case when c.IDENTITY_COLUMN = 'YES' then 1 end as identity_seed,
    case when c.IDENTITY_COLUMN = 'YES' then 1 end as identity_increment
from SYS.ALL_TAB_COLS c
where c.OWNER = :schema_name and c.TABLE_NAME = :object_name and c.HIDDEN_COLUMN = 'NO'
order by c.COLUMN_ID"""

_VIEW_UNION = f"""
select v.OWNER as schema_name, v.VIEW_NAME as object_name
from SYS.ALL_VIEWS v
inner join SYS.ALL_OBJECTS o on v.OWNER = o.OWNER and v.VIEW_NAME = o.OBJECT_NAME and o.OBJECT_TYPE = 'VIEW'
where {_USER_OBJECT} {{filter}}
union all
select mv.OWNER as schema_name, mv.MVIEW_NAME as object_name
from SYS.ALL_MVIEWS mv
inner join SYS.ALL_OBJECTS o
    on mv.OWNER = o.OWNER and mv.MVIEW_NAME = o.OBJECT_NAME and o.OBJECT_TYPE = 'MATERIALIZED VIEW'
where {_USER_OBJECT} {{mview_filter}}"""

_TABLE_NAMES_SQL = f"""
select t.OWNER as schema_name, t.TABLE_NAME as object_name
from SYS.ALL_TABLES t
inner join SYS.ALL_OBJECTS o on t.OWNER = o.OWNER and t.TABLE_NAME = o.OBJECT_NAME and o.OBJECT_TYPE = 'TABLE'
left join SYS.ALL_MVIEWS mv on t.OWNER = mv.OWNER and t.TABLE_NAME = mv.MVIEW_NAME
where {_USER_OBJECT} and mv.MVIEW_NAME is null"""

STATEMENTS = CatalogStatements(
    identifier_defaults="""
select
    SYS_CONTEXT('USERENV', 'SERVER_HOST') as server_name,
    SYS_CONTEXT('USERENV', 'DB_NAME') as database_name,
    SYS_CONTEXT('USERENV', 'CURRENT_USER') as schema_name
from DUAL""",
    table_names=f"{_TABLE_NAMES_SQL}\norder by t.OWNER, t.TABLE_NAME",
    table_name=f"{_TABLE_NAMES_SQL}\n    and t.OWNER = :schema_name and t.TABLE_NAME = :object_name",
    columns=_COLUMNS_SQL,
    primary_key=_KEY_COLUMNS_SQL.format(constraint_type="P"),
    unique_keys=_KEY_COLUMNS_SQL.format(constraint_type="U"),
    indexes="""
select
    ai.INDEX_NAME as index_name,
    case when ai.UNIQUENESS = 'UNIQUE' then 1 else 0 end as is_unique,
    aic.COLUMN_NAME as column_name,
    aic.COLUMN_POSITION as column_position,
    case when aic.DESCEND = 'DESC' then 1 else 0 end as is_descending,
    0 as is_included,
    case when ai.STATUS = 'UNUSABLE' then 0 else 1 end as is_enabled
from SYS.ALL_INDEXES ai
inner join SYS.ALL_IND_COLUMNS aic on ai.OWNER = aic.INDEX_OWNER and ai.INDEX_NAME = aic.INDEX_NAME
left join SYS.ALL_CONSTRAINTS ac
    on ac.OWNER = ai.TABLE_OWNER and ac.TABLE_NAME = ai.TABLE_NAME
    and ac.INDEX_NAME = ai.INDEX_NAME and ac.CONSTRAINT_TYPE in ('P', 'U')
where ai.TABLE_OWNER = :schema_name and ai.TABLE_NAME = :object_name and ac.CONSTRAINT_NAME is null
order by ai.INDEX_NAME, aic.COLUMN_POSITION""",
    checks="""
select
    CONSTRAINT_NAME as constraint_name,
    SEARCH_CONDITION as definition,
    case when STATUS = 'ENABLED' then 1 else 0 end as is_enabled
from SYS.ALL_CONSTRAINTS
where OWNER = :schema_name and TABLE_NAME = :object_name and CONSTRAINT_TYPE = 'C'
order by CONSTRAINT_NAME""",
    triggers="""
select
    TRIGGER_NAME as trigger_name,
    TRIGGER_TYPE as timing,
    TRIGGERING_EVENT as events,
    TRIGGER_BODY as definition,
    case when STATUS = 'ENABLED' then 1 else 0 end as is_enabled
from SYS.ALL_TRIGGERS
where TABLE_OWNER = :schema_name and TABLE_NAME = :object_name and BASE_OBJECT_TYPE = 'TABLE'
order by TRIGGER_NAME""",
    parent_keys="""
select
    ac.CONSTRAINT_NAME as constraint_name,
    ac.CONSTRAINT_NAME as constraint_id,
    acc.COLUMN_NAME as column_name,
    acc.POSITION as column_position,
    pac.OWNER as parent_schema,
    pac.TABLE_NAME as parent_table,
    pac.CONSTRAINT_NAME as parent_key_name,
    pac.CONSTRAINT_TYPE as parent_key_type,
    pacc.COLUMN_NAME as parent_column_name,
    'NO ACTION' as update_action,
    ac.DELETE_RULE as delete_action,
    case when ac.STATUS = 'ENABLED' then 1 else 0 end as is_enabled
from SYS.ALL_CONSTRAINTS ac
inner join SYS.ALL_CONS_COLUMNS acc
    on ac.OWNER = acc.OWNER and ac.CONSTRAINT_NAME = acc.CONSTRAINT_NAME and ac.TABLE_NAME = acc.TABLE_NAME
inner join SYS.ALL_CONSTRAINTS pac on pac.OWNER = ac.R_OWNER and pac.CONSTRAINT_NAME = ac.R_CONSTRAINT_NAME
inner join SYS.ALL_CONS_COLUMNS pacc
    on pac.OWNER = pacc.OWNER and pac.CONSTRAINT_NAME = pacc.CONSTRAINT_NAME and pacc.POSITION = acc.POSITION
where ac.OWNER = :schema_name and ac.TABLE_NAME = :object_name
    and ac.CONSTRAINT_TYPE = 'R' and pac.CONSTRAINT_TYPE in ('P', 'U')
order by ac.CONSTRAINT_NAME, acc.POSITION""",
    child_keys="""
select
    ac.OWNER as child_schema,
    ac.TABLE_NAME as child_table,
    ac.CONSTRAINT_NAME as child_key_name,
    ac.CONSTRAINT_NAME as constraint_id,
    acc.COLUMN_NAME as child_column_name,
    acc.POSITION as column_position
from SYS.ALL_CONSTRAINTS ac
inner join SYS.ALL_CONS_COLUMNS acc
    on ac.OWNER = acc.OWNER and ac.CONSTRAINT_NAME = acc.CONSTRAINT_NAME and ac.TABLE_NAME = acc.TABLE_NAME
inner join SYS.ALL_CONSTRAINTS pac on pac.OWNER = ac.R_OWNER and pac.CONSTRAINT_NAME = ac.R_CONSTRAINT_NAME
where pac.OWNER = :schema_name and pac.TABLE_NAME = :object_name
    and ac.CONSTRAINT_TYPE = 'R' and pac.CONSTRAINT_TYPE in ('P', 'U')
order by ac.OWNER, ac.TABLE_NAME, ac.CONSTRAINT_NAME, acc.POSITION""",
    view_names=_VIEW_UNION.format(filter="", mview_filter="") + "\norder by 1, 2",
    view_name=_VIEW_UNION.format(
        filter="and v.OWNER = :schema_name and v.VIEW_NAME = :object_name",
        mview_filter="and mv.OWNER = :schema_name and mv.MVIEW_NAME = :object_name",
    ),
    view_definition="""
select OWNER as schema_name, VIEW_NAME as view_name, TEXT as definition, 0 as is_materialized
from SYS.ALL_VIEWS
where OWNER = :schema_name and VIEW_NAME = :object_name
union all
select OWNER as schema_name, MVIEW_NAME as view_name, QUERY as definition, 1 as is_materialized
from SYS.ALL_MVIEWS
where OWNER = :schema_name and MVIEW_NAME = :object_name""",
    view_columns=_COLUMNS_SQL,
    sequences=f"""
select
    s.SEQUENCE_OWNER as schema_name,
    s.SEQUENCE_NAME as sequence_name,
    case when s.INCREMENT_BY > 0 then s.MIN_VALUE else s.MAX_VALUE end as start_value,
    s.INCREMENT_BY as increment,
    s.MIN_VALUE as min_value,
    s.MAX_VALUE as max_value,
    case when s.CYCLE_FLAG = 'Y' then 1 else 0 end as is_cycling,
    case when s.CACHE_SIZE > 0 then s.CACHE_SIZE end as cache_size
from SYS.ALL_SEQUENCES s
inner join SYS.ALL_OBJECTS o
    on s.SEQUENCE_OWNER = o.OWNER and s.SEQUENCE_NAME = o.OBJECT_NAME and o.OBJECT_TYPE = 'SEQUENCE'
where {_USER_OBJECT} {{filter}}
order by s.SEQUENCE_OWNER, s.SEQUENCE_NAME""",
    sequence_filter="and s.SEQUENCE_OWNER = :schema_name and s.SEQUENCE_NAME = :object_name",
    synonyms=f"""
select
    s.OWNER as schema_name,
    s.SYNONYM_NAME as synonym_name,
    null as target_server,
    s.DB_LINK as target_database,
    s.TABLE_OWNER as target_schema,
    s.TABLE_NAME as target_name
from SYS.ALL_SYNONYMS s
inner join SYS.ALL_OBJECTS o
    on s.OWNER = o.OWNER and s.SYNONYM_NAME = o.OBJECT_NAME and o.OBJECT_TYPE = 'SYNONYM'
where {_USER_OBJECT} {{filter}}
order by s.OWNER, s.SYNONYM_NAME""",
    synonym_filter="and s.OWNER = :schema_name and s.SYNONYM_NAME = :object_name",
    routines=f"""
select o.OWNER as schema_name, o.OBJECT_NAME as routine_name
from SYS.ALL_OBJECTS o
where o.OBJECT_TYPE in ('FUNCTION', 'PROCEDURE') and {_USER_OBJECT} {{filter}}
order by o.OWNER, o.OBJECT_NAME""",
    routine_filter="and o.OWNER = :schema_name and o.OBJECT_NAME = :object_name",
)

_ROUTINE_SOURCE_SQL = """
select TEXT as text
from SYS.ALL_SOURCE
where OWNER = :schema_name and NAME = :object_name and TYPE in ('FUNCTION', 'PROCEDURE')
order by LINE"""


class OracleCatalog(StatementCatalog):
    """Oracle. Names are case-sensitive; unquoted identifiers fold to upper case."""

    dialect = "oracle"
    comparer = ORDINAL
    resolver = OracleIdentifierResolutionStrategy()
    statements = STATEMENTS

    def is_system_check(self, row: CheckRow, column_names: Sequence[str]) -> bool:
        """NOT NULL column constraints are stored as checks; they are not user checks."""
        definition = row.definition.strip()
        for column_name in column_names:
            pattern = rf'^"?{re.escape(column_name)}"?\s+IS\s+NOT\s+NULL$'
            if re.match(pattern, definition, re.IGNORECASE):
                return True
        return False

    async def _with_source(self, row: RoutineRow) -> RoutineRow:
        name = Identifier(schema=row.schema_name, local_name=row.routine_name)
        lines = await self.connection.query(_ROUTINE_SOURCE_SQL, object_params(name))
        definition = "".join(str(line["text"] or "") for line in lines)
        return RoutineRow(schema_name=row.schema_name, routine_name=row.routine_name, definition=definition)

    async def all_routines(self) -> list[RoutineRow]:
        return [await self._with_source(row) for row in await super().all_routines()]

    async def routine(self, candidate: Identifier) -> RoutineRow | None:
        row = await super().routine(candidate)
        return await self._with_source(row) if row is not None else None
