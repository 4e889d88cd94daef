"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- 狀態機：集中管理所有階段轉換（RoomStateMachine）
- Registry：管理 Room 的建立、查詢、加入
- Posts Feed：技 SNS 的投稿列表
- Locks：並發控制工具
"""
