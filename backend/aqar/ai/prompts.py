"""LLM prompt templates"""

RECOMMENDATION_PROMPT = """\
Based on the following user data, recommend the best properties from the list.

User Preferences:
- Preferred Type: {preferred_type}
- Preferred Cities: {preferred_cities}
- Price Range: {price_min} - {price_max}
- Preferred Features: {preferred_features}

User's Favorite Properties (to understand taste):
{favorites}

Available Properties:
{properties}

Recommend the top 5 properties with a brief explanation of why each matches the user's preferences.
Respond with a JSON array only, where propertyIndex is the number shown next to the property:
[{{"propertyIndex": 1, "reason": "..."}}]
"""

MARKET_ANALYSIS_PROMPT = """\
Analyze this real estate market data for {city}:

Market Statistics:
- Total Listings: {total_listings}
- Average Price: {average_price:,.0f}
- Price Range: {min_price:,.0f} - {max_price:,.0f}
- Property Types: {property_types}

Property Type Breakdown:
{breakdown}

Provide a comprehensive market analysis including:
1. Market trends and insights
2. Investment opportunities
3. Price predictions
4. Best property types to invest in
5. Market comparison with similar cities

Keep the analysis professional and data-driven.
"""

SMART_SEARCH_PROMPT = """\
Parse this natural language real estate search query and extract structured search parameters.
The query may be written in Arabic or English.

Query: "{query}"

Extract and return JSON with these fields:
{{
  "type": "sale" or "rent" or null,
  "propertyType": "apartment", "house", "villa", "office", "land" or null,
  "city": string or null,
  "minPrice": number or null,
  "maxPrice": number or null,
  "bedrooms": number or null,
  "features": array of strings or null
}}

Examples:
- "شقة للبيع في المنامة بأقل من 100 ألف" -> {{"type": "sale", "propertyType": "apartment", "city": "المنامة", "maxPrice": 100000}}
- "villa for rent with pool and garden" -> {{"type": "rent", "propertyType": "villa", "features": ["pool", "garden"]}}
- "3 bedroom house in Dubai" -> {{"propertyType": "house", "city": "Dubai", "bedrooms": 3}}

Return only valid JSON.
"""

CHAT_SYSTEM_PROMPT = """\
You are a helpful AI assistant for a real estate platform in Bahrain. You help users with:
- Property search and recommendations
- Real estate investment advice
- Market analysis and trends
- Property valuation guidance
- Buying/renting process assistance

Always respond in Arabic when the user writes in Arabic, and in English when they write in English.
Be helpful, professional, and knowledgeable about real estate matters.
{user_context}
Recent Properties Available:
{property_context}

Provide a helpful, informative response. If the user is asking about specific properties, you can reference the ones listed above.
"""

CHAT_USER_CONTEXT = """
User Context:
- Preferred Type: {preferred_type}
- Preferred Cities: {preferred_cities}
- Price Range: {price_min} - {price_max}
- Favorite Properties: {favorite_count} properties
"""
