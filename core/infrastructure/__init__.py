"""
基础设施层公共组件：事务、缓存、统一响应和异常处理。
"""
