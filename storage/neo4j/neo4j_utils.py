"""
Neo4j 工具模块
负责 Neo4j 数据库连接、会话作用域和基础图操作（节点、关系、查询）
"""

import logging
import os
import re
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from neo4j import GraphDatabase

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class InvalidIdentifierError(ValueError):
    """标签、关系类型或属性键不是安全标识符"""


class RelationshipMatchError(RuntimeError):
    """关系端点匹配到的节点数量不是恰好一个"""

    def __init__(self, side: str, label: str, properties: Dict[str, Any], count: int):
        self.side = side
        self.label = label
        self.properties = properties
        self.count = count
        super().__init__(
            f"Expected exactly one {label} node for the '{side}' endpoint "
            f"matching {properties}, found {count}"
        )


def validate_identifier(name: str, allowed: Optional[Iterable[str]] = None,
                        kind: str = "label") -> str:
    """
    校验插入到 Cypher 文本中的标识符

    Args:
        name: 标签 / 关系类型 / 属性键
        allowed: 可选白名单，为空时只校验格式
        kind: 用于错误信息的标识符类别

    Returns:
        校验通过的标识符
    """
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise InvalidIdentifierError(f"Unsafe {kind}: {name!r}")
    if allowed and name not in allowed:
        raise InvalidIdentifierError(f"{kind} not in allow-list: {name!r}")
    return name


def build_where_clause(variable: str, properties: Dict[str, Any],
                       prefix: str) -> Tuple[str, Dict[str, Any]]:
    """
    根据属性字典生成等值过滤条件（隐式 AND）

    参数名按位置编号，避免属性键与其他参数冲突。

    Returns:
        (WHERE 子句，不含关键字；参数字典)
    """
    conditions = []
    params: Dict[str, Any] = {}
    for i, (key, value) in enumerate(properties.items()):
        validate_identifier(key, kind="property key")
        param = f"{prefix}{i}"
        conditions.append(f"{variable}.`{key}` = ${param}")
        params[param] = value
    return " AND ".join(conditions), params


def _with_where(pattern: str, where: str) -> str:
    return f"{pattern} WHERE {where}" if where else pattern


class Neo4jConnection:
    """Neo4j 数据库连接句柄，显式创建、显式关闭"""

    def __init__(self, uri: str = None, user: str = None, password: str = None,
                 database: str = None,
                 allowed_labels: Optional[Iterable[str]] = None,
                 allowed_relationship_types: Optional[Iterable[str]] = None,
                 driver: Any = None,
                 **driver_options: Any):
        """
        初始化 Neo4j 连接

        Args:
            uri: Neo4j 数据库 URI
            user: 用户名
            password: 密码
            database: 目标数据库名，None 表示服务器默认库
            allowed_labels: 标签白名单
            allowed_relationship_types: 关系类型白名单
            driver: 已创建的驱动（测试时注入）
            driver_options: 传给 GraphDatabase.driver 的连接池配置
        """
        self.uri = uri or os.getenv('NEO4J_URI', 'bolt://localhost:7687')
        self.user = user or os.getenv('NEO4J_USERNAME', 'neo4j')
        self.password = password or os.getenv('NEO4J_PASSWORD', 'password')
        self.database = database or os.getenv('NEO4J_DATABASE') or None
        self.allowed_labels = frozenset(allowed_labels or ())
        self.allowed_relationship_types = frozenset(allowed_relationship_types or ())

        if driver is not None:
            self.driver = driver
            return

        try:
            self.driver = GraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
                **driver_options
            )
            logger.info(f"Connected to Neo4j: {self.uri}")
        except Exception as e:
            logger.error(f"Neo4j connection failed: {e}")
            raise

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], **kwargs: Any) -> "Neo4jConnection":
        """根据配置字典（Config.neo4j）创建连接"""
        options = {}
        if cfg.get('max_connection_pool_size'):
            options['max_connection_pool_size'] = int(cfg['max_connection_pool_size'])
        if cfg.get('connection_timeout'):
            options['connection_timeout'] = float(cfg['connection_timeout'])
        options.update(kwargs)
        return cls(
            uri=cfg.get('uri'),
            user=cfg.get('username'),
            password=cfg.get('password'),
            database=cfg.get('database'),
            allowed_labels=cfg.get('allowed_labels'),
            allowed_relationship_types=cfg.get('allowed_relationship_types'),
            **options
        )

    def __enter__(self) -> "Neo4jConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self):
        """关闭数据库连接"""
        if getattr(self, 'driver', None) is not None:
            self.driver.close()
            self.driver = None
            logger.info("Neo4j connection closed")

    @contextmanager
    def session(self) -> Iterator[Any]:
        """会话作用域：无论成功或异常都会释放会话"""
        with self.driver.session(database=self.database) as session:
            yield session

    def label(self, name: str) -> str:
        return validate_identifier(name, self.allowed_labels, kind="label")

    def relationship_type(self, name: str) -> str:
        return validate_identifier(name, self.allowed_relationship_types, kind="relationship type")

    def run_cypher_query(self, query: str, parameters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        执行任意 Cypher 查询（参数绑定）

        Args:
            query: Cypher 查询语句
            parameters: 查询参数

        Returns:
            查询结果行列表
        """
        if parameters is None:
            parameters = {}

        try:
            with self.session() as session:
                result = session.run(query, parameters)
                return [record.data() for record in result]
        except Exception as e:
            logger.error(f"Query failed: {query}, error: {e}")
            raise

    def execute_write_query(self, query: str, parameters: Dict[str, Any] = None) -> Any:
        """
        执行写操作查询

        Returns:
            写操作计数器（SummaryCounters）
        """
        if parameters is None:
            parameters = {}

        try:
            with self.session() as session:
                summary = session.run(query, parameters).consume()
                return summary.counters
        except Exception as e:
            logger.error(f"Write query failed: {query}, error: {e}")
            raise

    def execute_write(self, work: Callable[..., Any], *args: Any) -> Any:
        """在单个写事务中执行 work(tx, *args)"""
        with self.session() as session:
            return session.execute_write(work, *args)

    def create_node(self, label: str, properties: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        创建节点

        Args:
            label: 节点标签
            properties: 节点属性

        Returns:
            创建的节点属性
        """
        label = self.label(label)
        for key in (properties or {}):
            validate_identifier(key, kind="property key")
        query = f"CREATE (n:`{label}` $properties) RETURN n"
        result = self.run_cypher_query(query, {'properties': properties or {}})
        return result[0]['n'] if result else None

    def find_nodes(self, label: str, properties: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        按属性等值过滤查找节点，无排序、无分页

        Args:
            label: 节点标签
            properties: 过滤属性，为空时返回该标签的全部节点

        Returns:
            节点属性列表
        """
        label = self.label(label)
        where, params = build_where_clause("n", properties or {}, "p")
        query = f"{_with_where(f'MATCH (n:`{label}`)', where)} RETURN n"
        return [row['n'] for row in self.run_cypher_query(query, params)]

    def count_nodes(self, label: str) -> int:
        label = self.label(label)
        result = self.run_cypher_query(f"MATCH (n:`{label}`) RETURN count(n) AS count")
        return result[0]['count'] if result else 0

    def clear_labels(self, labels: Iterable[str]) -> int:
        """
        删除指定标签的所有节点及其关系

        Returns:
            删除的节点总数
        """
        deleted = 0
        for name in labels:
            label = self.label(name)
            counters = self.execute_write_query(f"MATCH (n:`{label}`) DETACH DELETE n")
            deleted += getattr(counters, 'nodes_deleted', 0)
        logger.debug(f"Cleared {deleted} nodes")
        return deleted

    def create_relationship(self, from_label: str, from_props: Dict[str, Any],
                            to_label: str, to_props: Dict[str, Any],
                            rel_type: str, rel_props: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        在两个唯一匹配的节点之间创建有向关系

        两端各自必须恰好匹配一个节点，否则抛出 RelationshipMatchError 且不写入。
        计数与创建在同一个写事务中完成。

        Args:
            from_label: 起始节点标签
            from_props: 起始节点匹配属性
            to_label: 结束节点标签
            to_props: 结束节点匹配属性
            rel_type: 关系类型
            rel_props: 关系属性

        Returns:
            {'source': 起点属性, 'type': 关系类型, 'properties': 关系属性, 'target': 终点属性}
        """
        from_label = self.label(from_label)
        to_label = self.label(to_label)
        rel_type = self.relationship_type(rel_type)
        from_props = dict(from_props or {})
        to_props = dict(to_props or {})
        for key in (rel_props or {}):
            validate_identifier(key, kind="property key")

        from_where, from_params = build_where_clause("a", from_props, "from_")
        to_where, to_params = build_where_clause("b", to_props, "to_")

        from_match = _with_where(f"MATCH (a:`{from_label}`)", from_where)
        to_match = _with_where(f"MATCH (b:`{to_label}`)", to_where)
        create_query = (
            f"{from_match}\n{to_match}\n"
            f"CREATE (a)-[r:`{rel_type}` $rel_props]->(b)\n"
            "RETURN properties(a) AS source, type(r) AS type, "
            "properties(r) AS properties, properties(b) AS target"
        )
        params = {**from_params, **to_params, 'rel_props': rel_props or {}}

        def work(tx):
            from_count = tx.run(f"{from_match} RETURN count(a) AS count", from_params).single()['count']
            if from_count != 1:
                raise RelationshipMatchError('from', from_label, from_props, from_count)
            to_count = tx.run(f"{to_match} RETURN count(b) AS count", to_params).single()['count']
            if to_count != 1:
                raise RelationshipMatchError('to', to_label, to_props, to_count)
            return tx.run(create_query, params).single().data()

        try:
            return self.execute_write(work)
        except RelationshipMatchError as e:
            logger.warning(str(e))
            raise
        except Exception as e:
            logger.error(f"Relationship creation failed: {rel_type}, error: {e}")
            raise

    def server_info(self) -> Dict[str, Any]:
        """
        连通性检查：执行 RETURN 1 并读取 dbms.components()

        Returns:
            {'test': 1, 'components': [{'name', 'version', 'edition'}, ...]}
        """
        test = self.run_cypher_query("RETURN 1 AS test")[0]['test']
        rows = self.run_cypher_query(
            "CALL dbms.components() YIELD name, versions, edition "
            "RETURN name, versions, edition"
        )
        components = []
        for row in rows:
            versions = row.get('versions') or []
            components.append({
                'name': row.get('name'),
                'version': versions[0] if versions else None,
                'edition': row.get('edition'),
            })
        return {'test': test, 'components': components}
