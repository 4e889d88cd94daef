"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- TallyService：計票與贏家判定
- NamingService：房間代碼、ID、預設名稱
- TextService：去空白與截斷
- SnapshotService：Room / Post 轉成對外格式
"""
