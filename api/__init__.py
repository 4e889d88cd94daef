"""
API 層

這個 package 只負責 HTTP 轉換，不放業務邏輯：
- rooms：房間、提交技、投票
- posts：技 SNS
"""
