"""MySQL catalog queries over ``information_schema``.

MySQL has no separate schema level: a database is a schema, so defaults
report the current database for both.
"""

from __future__ import annotations

from schematic_core.identifier import ORDINAL_IGNORE_CASE

from schematic_introspect.catalog.base import CatalogStatements, StatementCatalog

_SYSTEM_SCHEMAS = "('mysql', 'information_schema', 'performance_schema', 'sys')"

_COLUMNS_SQL = """
select
    c.column_name as column_name,
    null as type_schema,
    c.data_type as type_name,
    c.character_maximum_length as max_length,
    c.numeric_precision as numeric_precision,
    c.numeric_scale as numeric_scale,
    c.collation_name as collation_name,
    case when c.is_nullable = 'YES' then 1 else 0 end as is_nullable,
    c.column_default as default_value,
    case when c.generation_expression is not null and c.generation_expression <> '' then 1 else 0 end as is_computed,
    c.generation_expression as computed_definition,
    case when c.extra like '%auto_increment%' then 1 end as identity_seed,
    case when c.extra like '%auto_increment%' then 1 end as identity_increment
from information_schema.columns c
where c.table_schema = :schema_name and c.table_name = :object_name
order by c.ordinal_position"""

_KEY_COLUMNS_SQL = """
select
    tc.constraint_name as constraint_name,
    tc.constraint_name as constraint_id,
    kcu.column_name as column_name,
    kcu.ordinal_position as column_position,
    1 as is_enabled
from information_schema.table_constraints tc
inner join information_schema.key_column_usage kcu
    on tc.constraint_schema = kcu.constraint_schema
    and tc.constraint_name = kcu.constraint_name
    and tc.table_name = kcu.table_name
where tc.table_schema = :schema_name and tc.table_name = :object_name
    and tc.constraint_type = '{constraint_type}'
order by tc.constraint_name, kcu.ordinal_position"""

STATEMENTS = CatalogStatements(
    identifier_defaults="""
select
    @@hostname as server_name,
    database() as database_name,
    database() as schema_name""",
    table_names=f"""
select table_schema as schema_name, table_name as object_name
from information_schema.tables
where table_type = 'BASE TABLE' and table_schema not in {_SYSTEM_SCHEMAS}
order by table_schema, table_name""",
    table_name=f"""
select table_schema as schema_name, table_name as object_name
from information_schema.tables
where table_schema = :schema_name and table_name = :object_name
    and table_type = 'BASE TABLE' and table_schema not in {_SYSTEM_SCHEMAS}""",
    columns=_COLUMNS_SQL,
    primary_key=_KEY_COLUMNS_SQL.format(constraint_type="PRIMARY KEY"),
    unique_keys=_KEY_COLUMNS_SQL.format(constraint_type="UNIQUE"),
    indexes="""
select
    s.index_name as index_name,
    case when s.non_unique = 0 then 1 else 0 end as is_unique,
    s.column_name as column_name,
    s.seq_in_index as column_position,
    case when s.collation = 'D' then 1 else 0 end as is_descending,
    0 as is_included,
    1 as is_enabled
from information_schema.statistics s
where s.table_schema = :schema_name and s.table_name = :object_name and s.index_name <> 'PRIMARY'
order by s.index_name, s.seq_in_index""",
    checks="""
select
    cc.constraint_name as constraint_name,
    cc.check_clause as definition,
    case when tc.enforced = 'YES' then 1 else 0 end as is_enabled
from information_schema.table_constraints tc
inner join information_schema.check_constraints cc
    on tc.constraint_schema = cc.constraint_schema and tc.constraint_name = cc.constraint_name
where tc.table_schema = :schema_name and tc.table_name = :object_name and tc.constraint_type = 'CHECK'
order by cc.constraint_name""",
    triggers="""
select
    t.trigger_name as trigger_name,
    t.action_timing as timing,
    t.event_manipulation as events,
    t.action_statement as definition,
    1 as is_enabled
from information_schema.triggers t
where t.event_object_schema = :schema_name and t.event_object_table = :object_name
order by t.trigger_name""",
    parent_keys="""
select
    kcu.constraint_name as constraint_name,
    kcu.constraint_name as constraint_id,
    kcu.column_name as column_name,
    kcu.ordinal_position as column_position,
    kcu.referenced_table_schema as parent_schema,
    kcu.referenced_table_name as parent_table,
    rc.unique_constraint_name as parent_key_name,
    case when rc.unique_constraint_name = 'PRIMARY' then 'PRIMARY' end as parent_key_type,
    kcu.referenced_column_name as parent_column_name,
    rc.update_rule as update_action,
    rc.delete_rule as delete_action,
    1 as is_enabled
from information_schema.referential_constraints rc
inner join information_schema.key_column_usage kcu
    on rc.constraint_schema = kcu.constraint_schema
    and rc.constraint_name = kcu.constraint_name
    and rc.table_name = kcu.table_name
where kcu.table_schema = :schema_name and kcu.table_name = :object_name
order by kcu.constraint_name, kcu.ordinal_position""",
    child_keys="""
select
    kcu.table_schema as child_schema,
    kcu.table_name as child_table,
    kcu.constraint_name as child_key_name,
    kcu.constraint_name as constraint_id,
    kcu.column_name as child_column_name,
    kcu.ordinal_position as column_position
from information_schema.referential_constraints rc
inner join information_schema.key_column_usage kcu
    on rc.constraint_schema = kcu.constraint_schema
    and rc.constraint_name = kcu.constraint_name
    and rc.table_name = kcu.table_name
where kcu.referenced_table_schema = :schema_name and kcu.referenced_table_name = :object_name
order by kcu.table_schema, kcu.table_name, kcu.constraint_name, kcu.ordinal_position""",
    view_names=f"""
select table_schema as schema_name, table_name as object_name
from information_schema.views
where table_schema not in {_SYSTEM_SCHEMAS}
order by table_schema, table_name""",
    view_name=f"""
select table_schema as schema_name, table_name as object_name
from information_schema.views
where table_schema = :schema_name and table_name = :object_name and table_schema not in {_SYSTEM_SCHEMAS}""",
    view_definition="""
select
    table_schema as schema_name,
    table_name as view_name,
    view_definition as definition,
    0 as is_materialized
from information_schema.views
where table_schema = :schema_name and table_name = :object_name""",
    view_columns=_COLUMNS_SQL,
    routines=f"""
select
    r.routine_schema as schema_name,
    r.routine_name as routine_name,
    r.routine_definition as definition
from information_schema.routines r
where r.routine_schema not in {_SYSTEM_SCHEMAS} {{filter}}
order by r.routine_schema, r.routine_name""",
    routine_filter="and r.routine_schema = :schema_name and r.routine_name = :object_name",
)


class MySqlCatalog(StatementCatalog):
    """MySQL. Column and index names are case-insensitive on every platform."""

    dialect = "mysql"
    comparer = ORDINAL_IGNORE_CASE
    statements = STATEMENTS
