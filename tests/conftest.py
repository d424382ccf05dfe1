import pytest

SAMPLE_PAGE = """<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01 Transitional//EN" "http://www.w3.org/TR/html4/loose.dtd">
<html lang="ja">
<head>
<title>Sample</title>
</head>
<body>
<div class="header">
<h2 title="クラス Sample" class="title">クラス Sample</h2>
</div>
<div class="contentContainer">
<div class="description">
<ul class="blockList">
<li class="blockList">
<hr>
<br>
<pre>public class <span class="typeNameLabel">Sample</span>
extends <a href="../../java/lang/Object.html" title="java.lang内のクラス">Object</a></pre>
<div class="block">サンプルのクラスです。<a href="../../com/example/Helper.html" title="com.example内のクラス"><code>Helper</code></a>を参照。</div>
<dl>
<dt><span class="simpleTagLabel">導入されたバージョン:</span></dt>
<dd>1.2</dd>
<dt><span class="seeLabel">関連項目:</span></dt>
<dd><a href="../../java/util/List.html" title="java.util内のインタフェース"><code>List</code></a>,
<a href="../../com/example/Sample.html#size--"><code>size()</code></a></dd>
</dl>
</li>
</ul>
</div>
<div class="details">
<ul class="blockList">
<li class="blockList">
<ul class="blockList">
<li class="blockList"><a name="field.detail">
<!--   -->
</a>
<h3>フィールドの詳細</h3>
<a name="MAX">
<!--   -->
</a>
<ul class="blockListLast">
<li class="blockList">
<h4>MAX</h4>
<pre>public static final&nbsp;int MAX</pre>
<div class="block">最大値です。</div>
</li>
</ul>
</li>
</ul>
<ul class="blockList">
<li class="blockList"><a name="method.detail">
<!--   -->
</a>
<h3>メソッドの詳細</h3>
<a name="get-int-java.lang.String-">
<!--   -->
</a>
<ul class="blockList">
<li class="blockList">
<h4>get</h4>
<pre>public&nbsp;<a href="../../java/lang/String.html" title="java.lang内のクラス">String</a>&nbsp;get(int&nbsp;index,
                  <a href="../../java/lang/String.html" title="java.lang内のクラス">String</a>&nbsp;name)
           throws <a href="../../java/io/IOException.html" title="java.io内のクラス">IOException</a></pre>
<div class="block">要素を取得します。</div>
<dl>
<dt><span class="paramLabel">パラメータ:</span></dt>
<dd><code>index</code> - インデックス</dd>
<dd><code>name</code> - 名前</dd>
<dt><span class="returnLabel">戻り値:</span></dt>
<dd>要素</dd>
<dt><span class="throwsLabel">例外:</span></dt>
<dd><code><a href="../../java/io/IOException.html" title="java.io内のクラス">IOException</a></code> - 入出力エラーの場合</dd>
</dl>
</li>
</ul>
<a name="old--">
<!--   -->
</a>
<ul class="blockList">
<li class="blockList">
<h4>old</h4>
<pre><a href="../../java/lang/Deprecated.html" title="java.lang内の注釈">@Deprecated</a>
public&nbsp;void&nbsp;old()</pre>
<div class="block"><span class="deprecatedLabel">非推奨。</span>&nbsp;<span class="deprecationComment"><a href="../../com/example/Sample.html#get-int-java.lang.String-"><code>get(int, String)</code></a>を使用してください</span></div>
<div class="block">古いメソッドです。</div>
</li>
</ul>
<a name="size--">
<!--   -->
</a>
<ul class="blockListLast">
<li class="blockList">
<h4>size</h4>
<pre>public&nbsp;int&nbsp;size()</pre>
<div class="block">サイズを返します。</div>
</li>
</ul>
</li>
</ul>
</li>
</ul>
</div>
</div>
</body>
</html>
"""

SAMPLE_SOURCE = """package com.example;

import java.io.IOException;

/**
 * A sample class.
 *
 * @see java.util.List
 * @see #size()
 * @since 1.2
 */
public class Sample {

    /** The maximum. */
    public static final int MAX = 10;

    /**
     * Gets an element.
     *
     * @param index the index
     * @param name the name
     * @return the element
     * @throws IOException if an I/O error occurs
     */
    public String get(int index, String name) throws IOException {
        return name;
    }

    /**
     * @deprecated use {@link #get(int, String)}
     */
    @Deprecated
    public void old() {
    }

    public int size() {
        return 0;
    }
}
"""

SAMPLE_MERGED = """package com.example;

import java.io.IOException;

/**
 * サンプルのクラスです。{@link Helper}を参照。
 *
 * @see     java.util.List
 * @see     #size()
 * @since   1.2
 */
public class Sample {

    /** 最大値です。 */
    public static final int MAX = 10;

    /**
     * 要素を取得します。
     *
     * @param   index インデックス
     * @param   name  名前
     * @return  要素
     * @throws  IOException 入出力エラーの場合
     */
    public String get(int index, String name) throws IOException {
        return name;
    }

    /**
     * @deprecated {@link #get(int, String)}を使用してください
     */
    @Deprecated
    public void old() {
    }

    public int size() {
        return 0;
    }
}
"""

OUTER_PAGE = """<html>
<body>
<div class="description">
<ul class="blockList">
<li class="blockList">
<pre>public class <span class="typeNameLabel">Outer</span>
extends java.lang.Object</pre>
<div class="block">外側のクラスです。</div>
</li>
</ul>
</div>
<div class="details">
<ul class="blockList">
<li class="blockList">
<h4>stop</h4>
<pre>public&nbsp;void&nbsp;stop()</pre>
<div class="block">停止します。</div>
</li>
</ul>
</div>
</body>
</html>
"""

INNER_PAGE = """<html>
<body>
<div class="description">
<ul class="blockList">
<li class="blockList">
<pre>public static class <span class="typeNameLabel">Outer.Inner</span>
extends java.lang.Object</pre>
<div class="block">内部クラスです。</div>
</li>
</ul>
</div>
<div class="details">
<ul class="blockList">
<li class="blockList">
<h4>run</h4>
<pre>public&nbsp;void&nbsp;run()</pre>
<div class="block">実行します。</div>
</li>
</ul>
</div>
</body>
</html>
"""

OUTER_SOURCE = """package com.example;

public class Outer {

    static class Hidden {
        void run() {
        }
    }

    /**
     * Inner class.
     */
    public static class Inner {
        /** Runs. */
        public void run() {
        }
    }

    /** Stops. */
    public void stop() {
    }
}
"""

OUTER_MERGED = """package com.example;

public class Outer {

    static class Hidden {
        void run() {
        }
    }

    /**
     * 内部クラスです。
     */
    public static class Inner {
        /** 実行します。 */
        public void run() {
        }
    }

    /** 停止します。 */
    public void stop() {
    }
}
"""


@pytest.fixture
def sample_page() -> str:
    return SAMPLE_PAGE


@pytest.fixture
def sample_source() -> str:
    return SAMPLE_SOURCE


@pytest.fixture
def sample_merged() -> str:
    return SAMPLE_MERGED


@pytest.fixture
def outer_pages() -> dict[str, str]:
    return {"com.example.Outer": OUTER_PAGE, "com.example.Outer.Inner": INNER_PAGE}


@pytest.fixture
def outer_source() -> str:
    return OUTER_SOURCE


@pytest.fixture
def outer_merged() -> str:
    return OUTER_MERGED
