"""SQL Server catalog queries over the ``sys`` views."""

from __future__ import annotations

from schematic_core.identifier import ORDINAL_IGNORE_CASE

from schematic_introspect.catalog.base import CatalogStatements, StatementCatalog

_TABLE_FILTER = "schema_name(t.schema_id) = :schema_name and t.name = :object_name and t.is_ms_shipped = 0"

_KEY_COLUMNS_SQL = f"""
select
    kc.name as constraint_name,
    kc.name as constraint_id,
    c.name as column_name,
    ic.key_ordinal as column_position,
    case when i.is_disabled = 1 then 0 else 1 end as is_enabled
from sys.tables t
inner join sys.key_constraints kc on t.object_id = kc.parent_object_id
inner join sys.indexes i on kc.parent_object_id = i.object_id and kc.unique_index_id = i.index_id
inner join sys.index_columns ic on i.object_id = ic.object_id and i.index_id = ic.index_id
inner join sys.columns c on ic.object_id = c.object_id and ic.column_id = c.column_id
where {_TABLE_FILTER}
    and kc.type = '{{key_type}}' and ic.is_included_column = 0
order by kc.name, ic.key_ordinal"""

_COLUMNS_SQL = """
select
    c.name as column_name,
    schema_name(st.schema_id) as type_schema,
    st.name as type_name,
    c.max_length as max_length,
    c.precision as numeric_precision,
    c.scale as numeric_scale,
    c.collation_name as collation_name,
    c.is_nullable as is_nullable,
    dc.definition as default_value,
    c.is_computed as is_computed,
    cc.definition as computed_definition,
    convert(bigint, ic.seed_value) as identity_seed,
    convert(bigint, ic.increment_value) as identity_increment
from {source} o
inner join sys.columns c on o.object_id = c.object_id
left join sys.default_constraints dc on c.object_id = dc.parent_object_id and c.column_id = dc.parent_column_id
left join sys.computed_columns cc on c.object_id = cc.object_id and c.column_id = cc.column_id
left join sys.identity_columns ic on c.object_id = ic.object_id and c.column_id = ic.column_id
left join sys.types st on c.user_type_id = st.user_type_id
where schema_name(o.schema_id) = :schema_name and o.name = :object_name and o.is_ms_shipped = 0
order by c.column_id"""

STATEMENTS = CatalogStatements(
    identifier_defaults="""
select
    @@SERVERNAME as server_name,
    db_name() as database_name,
    schema_name() as schema_name""",
    table_names="""
select schema_name(t.schema_id) as schema_name, t.name as object_name
from sys.tables t
where t.is_ms_shipped = 0
order by schema_name(t.schema_id), t.name""",
    table_name=f"""
select schema_name(t.schema_id) as schema_name, t.name as object_name
from sys.tables t
where {_TABLE_FILTER}""",
    columns=_COLUMNS_SQL.format(source="sys.tables"),
    primary_key=_KEY_COLUMNS_SQL.format(key_type="PK"),
    unique_keys=_KEY_COLUMNS_SQL.format(key_type="UQ"),
    indexes=f"""
select
    i.name as index_name,
    i.is_unique as is_unique,
    c.name as column_name,
    ic.index_column_id as column_position,
    ic.is_descending_key as is_descending,
    ic.is_included_column as is_included,
    case when i.is_disabled = 1 then 0 else 1 end as is_enabled
from sys.tables t
inner join sys.indexes i on t.object_id = i.object_id
inner join sys.index_columns ic on i.object_id = ic.object_id and i.index_id = ic.index_id
inner join sys.columns c on ic.object_id = c.object_id and ic.column_id = c.column_id
where {_TABLE_FILTER}
    and i.is_primary_key = 0 and i.is_unique_constraint = 0
    and i.is_hypothetical = 0 and i.type <> 0
order by i.name, ic.index_column_id""",
    checks=f"""
select
    cc.name as constraint_name,
    cc.definition as definition,
    case when cc.is_disabled = 1 then 0 else 1 end as is_enabled
from sys.tables t
inner join sys.check_constraints cc on t.object_id = cc.parent_object_id
where {_TABLE_FILTER}
order by cc.name""",
    triggers=f"""
select
    tr.name as trigger_name,
    case when tr.is_instead_of_trigger = 1 then 'INSTEAD OF' else 'AFTER' end as timing,
    stuff((
        select ',' + te.type_desc
        from sys.trigger_events te
        where te.object_id = tr.object_id
        for xml path('')
    ), 1, 1, '') as events,
    object_definition(tr.object_id) as definition,
    case when tr.is_disabled = 1 then 0 else 1 end as is_enabled
from sys.tables t
inner join sys.triggers tr on t.object_id = tr.parent_id
where {_TABLE_FILTER}
order by tr.name""",
    parent_keys=f"""
select
    fk.name as constraint_name,
    fk.name as constraint_id,
    c.name as column_name,
    fkc.constraint_column_id as column_position,
    schema_name(pt.schema_id) as parent_schema,
    pt.name as parent_table,
    kc.name as parent_key_name,
    kc.type as parent_key_type,
    pc.name as parent_column_name,
    fk.update_referential_action_desc as update_action,
    fk.delete_referential_action_desc as delete_action,
    case when fk.is_disabled = 1 then 0 else 1 end as is_enabled
from sys.tables t
inner join sys.foreign_keys fk on t.object_id = fk.parent_object_id
inner join sys.foreign_key_columns fkc on fk.object_id = fkc.constraint_object_id
inner join sys.columns c on fkc.parent_object_id = c.object_id and fkc.parent_column_id = c.column_id
inner join sys.columns pc on fkc.referenced_object_id = pc.object_id and fkc.referenced_column_id = pc.column_id
inner join sys.tables pt on fk.referenced_object_id = pt.object_id
left join sys.key_constraints kc on fk.referenced_object_id = kc.parent_object_id and fk.key_index_id = kc.unique_index_id
where {_TABLE_FILTER}
order by fk.name, fkc.constraint_column_id""",
    child_keys=f"""
select
    schema_name(ct.schema_id) as child_schema,
    ct.name as child_table,
    fk.name as child_key_name,
    fk.name as constraint_id,
    c.name as child_column_name,
    fkc.constraint_column_id as column_position
from sys.tables t
inner join sys.foreign_keys fk on t.object_id = fk.referenced_object_id
inner join sys.foreign_key_columns fkc on fk.object_id = fkc.constraint_object_id
inner join sys.columns c on fkc.parent_object_id = c.object_id and fkc.parent_column_id = c.column_id
inner join sys.tables ct on fk.parent_object_id = ct.object_id
where {_TABLE_FILTER} and ct.is_ms_shipped = 0
order by schema_name(ct.schema_id), ct.name, fk.name, fkc.constraint_column_id""",
    view_names="""
select schema_name(v.schema_id) as schema_name, v.name as object_name
from sys.views v
where v.is_ms_shipped = 0
order by schema_name(v.schema_id), v.name""",
    view_name="""
select schema_name(v.schema_id) as schema_name, v.name as object_name
from sys.views v
where schema_name(v.schema_id) = :schema_name and v.name = :object_name and v.is_ms_shipped = 0""",
    view_definition="""
select
    schema_name(v.schema_id) as schema_name,
    v.name as view_name,
    object_definition(v.object_id) as definition,
    case when exists (
        select 1 from sys.indexes i where i.object_id = v.object_id and i.index_id = 1
    ) then 1 else 0 end as is_materialized
from sys.views v
where schema_name(v.schema_id) = :schema_name and v.name = :object_name and v.is_ms_shipped = 0""",
    view_columns=_COLUMNS_SQL.format(source="sys.views"),
    sequences="""
select
    schema_name(s.schema_id) as schema_name,
    s.name as sequence_name,
    convert(bigint, s.start_value) as start_value,
    convert(bigint, s.increment) as increment,
    convert(bigint, s.minimum_value) as min_value,
    convert(bigint, s.maximum_value) as max_value,
    s.is_cycling as is_cycling,
    case when s.is_cached = 1 then s.cache_size end as cache_size
from sys.sequences s
where s.is_ms_shipped = 0 {filter}
order by schema_name(s.schema_id), s.name""",
    sequence_filter="and schema_name(s.schema_id) = :schema_name and s.name = :object_name",
    synonyms="""
select
    schema_name(s.schema_id) as schema_name,
    s.name as synonym_name,
    parsename(s.base_object_name, 4) as target_server,
    parsename(s.base_object_name, 3) as target_database,
    parsename(s.base_object_name, 2) as target_schema,
    parsename(s.base_object_name, 1) as target_name
from sys.synonyms s
where s.is_ms_shipped = 0 {filter}
order by schema_name(s.schema_id), s.name""",
    synonym_filter="and schema_name(s.schema_id) = :schema_name and s.name = :object_name",
    routines="""
select
    schema_name(o.schema_id) as schema_name,
    o.name as routine_name,
    object_definition(o.object_id) as definition
from sys.objects o
where o.type in ('P', 'FN', 'IF', 'TF') and o.is_ms_shipped = 0 {filter}
order by schema_name(o.schema_id), o.name""",
    routine_filter="and schema_name(o.schema_id) = :schema_name and o.name = :object_name",
)


class SqlServerCatalog(StatementCatalog):
    """SQL Server. Default collations are case-insensitive, so names compare ignoring case."""

    dialect = "mssql"
    comparer = ORDINAL_IGNORE_CASE
    statements = STATEMENTS
