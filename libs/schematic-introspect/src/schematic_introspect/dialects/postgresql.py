"""PostgreSQL catalog queries over ``pg_catalog``."""

from __future__ import annotations

from schematic_core.identifier import ORDINAL
from schematic_core.resolution import PostgreSqlIdentifierResolutionStrategy

from schematic_introspect.catalog.base import CatalogStatements, StatementCatalog

_SYSTEM_SCHEMAS = "('pg_catalog', 'information_schema')"

_TABLE_FROM = """
from pg_catalog.pg_class t
inner join pg_catalog.pg_namespace ns on t.relnamespace = ns.oid"""

_TABLE_FILTER = "ns.nspname = :schema_name and t.relname = :object_name"

_REFERENTIAL_ACTION = """case {column}
        when 'a' then 'NO ACTION'
        when 'r' then 'RESTRICT'
        when 'c' then 'CASCADE'
        when 'n' then 'SET NULL'
        when 'd' then 'SET DEFAULT'
        else {column}
    end"""

_KEY_COLUMNS_SQL = f"""
select
    con.conname as constraint_name,
    con.conname as constraint_id,
    att.attname as column_name,
    k.ordinality as column_position,
    1 as is_enabled
{_TABLE_FROM}
inner join pg_catalog.pg_constraint con on con.conrelid = t.oid
cross join lateral unnest(con.conkey) with ordinality as k(attnum, ordinality)
inner join pg_catalog.pg_attribute att on att.attrelid = t.oid and att.attnum = k.attnum
where {_TABLE_FILTER} and con.contype = '{{contype}}'
order by con.conname, k.ordinality"""

_RELATION_COLUMNS_SQL = f"""
select
    a.attname as column_name,
    tns.nspname as type_schema,
    ty.typname as type_name,
    case when a.atttypmod > 4 and ty.typcategory = 'S' then a.atttypmod - 4 end as max_length,
    null as numeric_precision,
    null as numeric_scale,
    coll.collname as collation_name,
    case when a.attnotnull then 0 else 1 end as is_nullable,
    pg_catalog.pg_get_expr(ad.adbin, ad.adrelid) as default_value,
    case when a.attgenerated = 's' then 1 else 0 end as is_computed,
    case when a.attgenerated = 's' then pg_catalog.pg_get_expr(ad.adbin, ad.adrelid) end as computed_definition,
    case when a.attidentity in ('a', 'd') then seq.seqstart end as identity_seed,
    case when a.attidentity in ('a', 'd') then seq.seqincrement end as identity_increment
{_TABLE_FROM}
inner join pg_catalog.pg_attribute a on a.attrelid = t.oid
inner join pg_catalog.pg_type ty on a.atttypid = ty.oid
inner join pg_catalog.pg_namespace tns on ty.typnamespace = tns.oid
left join pg_catalog.pg_collation coll on a.attcollation = coll.oid and a.attcollation <> 0
left join pg_catalog.pg_attrdef ad on ad.adrelid = a.attrelid and ad.adnum = a.attnum
left join pg_catalog.pg_depend dep
    on dep.refobjid = t.oid and dep.refobjsubid = a.attnum and dep.deptype = 'i'
    and dep.classid = cast('pg_catalog.pg_class' as regclass)
left join pg_catalog.pg_sequence seq on seq.seqrelid = dep.objid
where {_TABLE_FILTER} and a.attnum > 0 and not a.attisdropped
order by a.attnum"""

STATEMENTS = CatalogStatements(
    identifier_defaults="""
select
    host(inet_server_addr()) as server_name,
    current_database() as database_name,
    current_schema() as schema_name""",
    table_names=f"""
select schemaname as schema_name, tablename as object_name
from pg_catalog.pg_tables
where schemaname not in {_SYSTEM_SCHEMAS}
order by schemaname, tablename""",
    table_name=f"""
select schemaname as schema_name, tablename as object_name
from pg_catalog.pg_tables
where schemaname = :schema_name and tablename = :object_name and schemaname not in {_SYSTEM_SCHEMAS}""",
    columns=_RELATION_COLUMNS_SQL,
    primary_key=_KEY_COLUMNS_SQL.format(contype="p"),
    unique_keys=_KEY_COLUMNS_SQL.format(contype="u"),
    indexes=f"""
select
    ic.relname as index_name,
    case when i.indisunique then 1 else 0 end as is_unique,
    att.attname as column_name,
    case when k.attnum = 0 then pg_catalog.pg_get_indexdef(i.indexrelid, cast(k.ordinality as integer), true) end
        as expression,
    k.ordinality as column_position,
    case when (i.indoption[cast(k.ordinality as integer) - 1] & 1) = 1 then 1 else 0 end as is_descending,
    case when k.ordinality > i.indnkeyatts then 1 else 0 end as is_included,
    case when i.indisvalid then 1 else 0 end as is_enabled
{_TABLE_FROM}
inner join pg_catalog.pg_index i on i.indrelid = t.oid
inner join pg_catalog.pg_class ic on i.indexrelid = ic.oid
cross join lateral unnest(cast(i.indkey as int2[])) with ordinality as k(attnum, ordinality)
left join pg_catalog.pg_attribute att on att.attrelid = t.oid and att.attnum = k.attnum and k.attnum > 0
where {_TABLE_FILTER}
    and not exists (
        select 1 from pg_catalog.pg_constraint c
        where c.conindid = i.indexrelid and c.conrelid = t.oid and c.contype in ('p', 'u')
    )
order by ic.relname, k.ordinality""",
    checks=f"""
select
    con.conname as constraint_name,
    pg_catalog.pg_get_constraintdef(con.oid, true) as definition,
    1 as is_enabled
{_TABLE_FROM}
inner join pg_catalog.pg_constraint con on con.conrelid = t.oid
where {_TABLE_FILTER} and con.contype = 'c'
order by con.conname""",
    triggers=f"""
select
    tr.tgname as trigger_name,
    case
        when (tr.tgtype & 2) = 2 then 'BEFORE'
        when (tr.tgtype & 64) = 64 then 'INSTEAD OF'
        else 'AFTER'
    end as timing,
    concat_ws(
        ',',
        case when (tr.tgtype & 4) = 4 then 'INSERT' end,
        case when (tr.tgtype & 16) = 16 then 'UPDATE' end,
        case when (tr.tgtype & 8) = 8 then 'DELETE' end,
        case when (tr.tgtype & 32) = 32 then 'TRUNCATE' end
    ) as events,
    pg_catalog.pg_get_triggerdef(tr.oid, true) as definition,
    case when tr.tgenabled = 'D' then 0 else 1 end as is_enabled
{_TABLE_FROM}
inner join pg_catalog.pg_trigger tr on tr.tgrelid = t.oid
where {_TABLE_FILTER} and not tr.tgisinternal
order by tr.tgname""",
    parent_keys=f"""
select
    con.conname as constraint_name,
    con.conname as constraint_id,
    ca.attname as column_name,
    k.ordinality as column_position,
    pns.nspname as parent_schema,
    pt.relname as parent_table,
    pk.conname as parent_key_name,
    pk.contype as parent_key_type,
    pa.attname as parent_column_name,
    {_REFERENTIAL_ACTION.format(column="con.confupdtype")} as update_action,
    {_REFERENTIAL_ACTION.format(column="con.confdeltype")} as delete_action,
    case when con.convalidated then 1 else 0 end as is_enabled
{_TABLE_FROM}
inner join pg_catalog.pg_constraint con on con.conrelid = t.oid
inner join pg_catalog.pg_class pt on con.confrelid = pt.oid
inner join pg_catalog.pg_namespace pns on pt.relnamespace = pns.oid
cross join lateral unnest(con.conkey, con.confkey) with ordinality as k(attnum, parent_attnum, ordinality)
inner join pg_catalog.pg_attribute ca on ca.attrelid = t.oid and ca.attnum = k.attnum
inner join pg_catalog.pg_attribute pa on pa.attrelid = pt.oid and pa.attnum = k.parent_attnum
left join pg_catalog.pg_constraint pk
    on pk.conrelid = con.confrelid and pk.conindid = con.conindid and pk.contype in ('p', 'u')
where {_TABLE_FILTER} and con.contype = 'f'
order by con.conname, k.ordinality""",
    child_keys=f"""
select
    cns.nspname as child_schema,
    ct.relname as child_table,
    con.conname as child_key_name,
    con.conname as constraint_id,
    ca.attname as child_column_name,
    k.ordinality as column_position
{_TABLE_FROM}
inner join pg_catalog.pg_constraint con on con.confrelid = t.oid
inner join pg_catalog.pg_class ct on con.conrelid = ct.oid
inner join pg_catalog.pg_namespace cns on ct.relnamespace = cns.oid
cross join lateral unnest(con.conkey) with ordinality as k(attnum, ordinality)
inner join pg_catalog.pg_attribute ca on ca.attrelid = ct.oid and ca.attnum = k.attnum
where {_TABLE_FILTER} and con.contype = 'f'
order by cns.nspname, ct.relname, con.conname, k.ordinality""",
    view_names=f"""
select schemaname as schema_name, viewname as object_name
from pg_catalog.pg_views
where schemaname not in {_SYSTEM_SCHEMAS}
union all
select schemaname as schema_name, matviewname as object_name
from pg_catalog.pg_matviews
where schemaname not in {_SYSTEM_SCHEMAS}
order by 1, 2""",
    view_name=f"""
select schemaname as schema_name, viewname as object_name
from pg_catalog.pg_views
where schemaname = :schema_name and viewname = :object_name and schemaname not in {_SYSTEM_SCHEMAS}
union all
select schemaname as schema_name, matviewname as object_name
from pg_catalog.pg_matviews
where schemaname = :schema_name and matviewname = :object_name and schemaname not in {_SYSTEM_SCHEMAS}""",
    view_definition="""
select schemaname as schema_name, viewname as view_name, definition as definition, 0 as is_materialized
from pg_catalog.pg_views
where schemaname = :schema_name and viewname = :object_name
union all
select schemaname as schema_name, matviewname as view_name, definition as definition, 1 as is_materialized
from pg_catalog.pg_matviews
where schemaname = :schema_name and matviewname = :object_name""",
    view_columns=_RELATION_COLUMNS_SQL,
    sequences=f"""
select
    s.schemaname as schema_name,
    s.sequencename as sequence_name,
    s.start_value as start_value,
    s.increment_by as increment,
    s.min_value as min_value,
    s.max_value as max_value,
    case when s.cycle then 1 else 0 end as is_cycling,
    s.cache_size as cache_size
from pg_catalog.pg_sequences s
where s.schemaname not in {_SYSTEM_SCHEMAS} {{filter}}
order by s.schemaname, s.sequencename""",
    sequence_filter="and s.schemaname = :schema_name and s.sequencename = :object_name",
    routines=f"""
select
    ns.nspname as schema_name,
    p.proname as routine_name,
    pg_catalog.pg_get_functiondef(p.oid) as definition
from pg_catalog.pg_proc p
inner join pg_catalog.pg_namespace ns on p.pronamespace = ns.oid
where ns.nspname not in {_SYSTEM_SCHEMAS} and p.prokind in ('f', 'p') {{filter}}
order by ns.nspname, p.proname""",
    routine_filter="and ns.nspname = :schema_name and p.proname = :object_name",
)


class PostgreSqlCatalog(StatementCatalog):
    """PostgreSQL. Names are case-sensitive; unquoted identifiers fold to lower case."""

    dialect = "postgresql"
    comparer = ORDINAL
    resolver = PostgreSqlIdentifierResolutionStrategy()
    statements = STATEMENTS
