"""领域层模型。

包含：
- models: Role / Message 值对象。
- conversation: 有序的会话消息记录。
- json_value: 未知结构 JSON 的访问函数与解码入口。
- exceptions: 客户端异常类型定义。
"""
