"""
兼容性矩阵

对 {组件 × Minecraft 版本} 的每个单元格并发解析，并把结果映射到三个加载器列。
"""

import asyncio
from typing import Dict, Iterable, Optional

from loguru import logger

from echoregistry.models import (
    INCOMPATIBLE,
    CompatibilityMatrix,
    RegistryConfig,
    VersionRecord,
    empty_loader_slots,
)
from echoregistry.services.dependency_service import DependencyService, unique_names


def _usable(version: Optional[str]) -> Optional[str]:
    if not version or version == INCOMPATIBLE:
        return None
    return version


class CompatibilityMatrixBuilder:
    """兼容性矩阵构建器"""

    def __init__(self, dependencies: DependencyService, config: RegistryConfig):
        self.dependencies = dependencies
        self.config = config

    async def build(
        self, components: Iterable[str], mc_versions: Iterable[str]
    ) -> CompatibilityMatrix:
        """
        构建兼容性矩阵

        Args:
            components: 组件名列表
            mc_versions: Minecraft 版本列表

        Returns:
            {组件: {版本: {加载器: 版本或 None}}}，每个单元格都包含三个加载器
        """
        components = unique_names(components)
        mc_versions = unique_names(mc_versions)

        matrix: CompatibilityMatrix = {
            component: {version: empty_loader_slots() for version in mc_versions}
            for component in components
        }

        await asyncio.gather(
            *(
                self._fill_cell(matrix, component, version)
                for component in components
                for version in mc_versions
            )
        )
        return matrix

    async def _fill_cell(
        self, matrix: CompatibilityMatrix, component: str, mc_version: str
    ):
        try:
            record = await self.dependencies.resolve_one(component, mc_version)
            matrix[component][mc_version] = self.cell_from_record(component, record)
        except Exception as e:
            logger.warning(f"获取 {component} 在 MC {mc_version} 的版本数据失败: {e}")
            matrix[component][mc_version] = empty_loader_slots()

    def cell_from_record(
        self, component: str, record: VersionRecord
    ) -> Dict[str, Optional[str]]:
        """把一条解析记录映射为矩阵单元格"""
        cell = empty_loader_slots()

        if self.config.is_built_in(component):
            target = self.config.matrix_loaders.get(component)
            if target in cell:
                cell[target] = _usable(record.version)
            return cell

        if record.loader_versions:
            for loader in cell:
                cell[loader] = _usable(record.loader_versions.get(loader))

        # 项目没有声明任何加载器时，退回到记录本身的加载器
        if all(v is None for v in cell.values()) and record.loader.value in cell:
            cell[record.loader.value] = _usable(record.version)

        return cell
